"""Unified command-line interface for the splitbill project.

Usage:
    splitbill parse receipt.txt
    splitbill parse - --json < receipt.txt
    splitbill scan <image>
    splitbill split receipt.json assignments.json
    splitbill serve [--port]
"""
