#!/usr/bin/env python3
"""
Main execution module for the SQS queue migration tool
"""

from sqs_migrator.cli.commands import main

if __name__ == "__main__":
    main()
