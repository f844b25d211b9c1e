"""
Source-chain event ingestion.

Watches the hook contract for IntentCreated logs and delivers decoded
events, in emission order, over a bounded channel.
"""
from .abi import INTENT_CREATED_SIGNATURE, INTENT_CREATED_TOPIC, INTENT_HOOK_ABI, decode_intent_created
from .channel import ChannelClosed, EventChannel
from .listener import (
    HookEventListener, LogSource, PollingLogSource, SubscriptionLogSource, select_log_source,
)

__all__ = [
    'INTENT_CREATED_SIGNATURE',
    'INTENT_CREATED_TOPIC',
    'INTENT_HOOK_ABI',
    'decode_intent_created',
    'ChannelClosed',
    'EventChannel',
    'HookEventListener',
    'LogSource',
    'PollingLogSource',
    'SubscriptionLogSource',
    'select_log_source',
]
