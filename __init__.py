"""Spending Tracker package.

Drop bank CSV exports onto a Streamlit page and chart cumulative, daily
(by category) and weekly spending. See ``app.py`` for the page and
``process_transactions.py`` for the command-line importer.
"""
