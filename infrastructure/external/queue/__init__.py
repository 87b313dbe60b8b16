"""Broadcast queue publishers (SQS, in-process)."""

from .sqs import SqsBroadcastQueue
from .inprocess import InProcessBroadcastQueue

__all__ = ["SqsBroadcastQueue", "InProcessBroadcastQueue"]
