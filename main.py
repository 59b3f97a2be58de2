#!/usr/bin/env python3
"""
Main entry point for the CT enforcement policy tool.

This wrapper script allows running the tool directly with python main.py
without installing the package first.
"""

import os
import sys

# Add the project root to sys.path to allow importing ctpolicy
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from ctpolicy.cli.main import main

if __name__ == "__main__":
    main()
