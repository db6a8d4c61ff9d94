"""Command-line interface for the SQS queue migration tool."""
