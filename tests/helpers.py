"""Builders for raw Chase CSV rows and statement text."""

from __future__ import annotations

import textwrap

CHASE_HEADER = "Transaction Date,Post Date,Description,Category,Type,Amount,Memo"


def chase_row(date: str, amount: str, description: str = "", category: str = "") -> dict:
    return {
        "Transaction Date": date,
        "Post Date": date,
        "Description": description,
        "Category": category,
        "Type": "Sale",
        "Amount": amount,
        "Memo": "",
    }


def chase_csv(body: str) -> bytes:
    text = CHASE_HEADER + "\n" + textwrap.dedent(body).strip("\n") + "\n"
    return text.encode("utf-8")
