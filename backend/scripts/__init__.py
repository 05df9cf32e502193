"""
Backend Scripts Module

Utility scripts for local database setup.

Available scripts:
    - seed_data.py: Registers sample users and opens a sample case

Usage:
    python -m scripts.seed_data
"""
