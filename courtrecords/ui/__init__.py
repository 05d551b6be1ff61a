"""Streamlit user interface for the review queues."""
