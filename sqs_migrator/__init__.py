#!/usr/bin/env python3
"""
SQS queue-to-queue message migration tool
"""

__version__ = "0.1.0"

# Import the main classes and functions for easier access
from sqs_migrator.core.config import MigrationConfig, load_config
from sqs_migrator.core.migrator import QueueMigrator, run_migration
from sqs_migrator.services.queue_client import QueueClient
