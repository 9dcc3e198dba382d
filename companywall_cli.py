#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Entry point for the companywall CLI
Run as: python companywall_cli.py or python -m companywall.cli
"""

from companywall.cli import main

if __name__ == "__main__":
    import sys
    sys.exit(main())
