#!/usr/bin/env python3
"""
Print IntentCreated events from the hook contract as they arrive.
"""
import logging
import os

from intentbridge.events import HookEventListener


def main():
    rpc_url = os.environ.get("EVM_RPC_URL", "https://sepolia.base.org")
    hook_address = os.environ.get("HOOK_ADDRESS")
    if not hook_address:
        print("ERROR: HOOK_ADDRESS environment variable is required")
        return

    logging.basicConfig(level=logging.INFO)
    listener = HookEventListener.for_endpoint(rpc_url, hook_address, poll_interval=5.0)
    channel = listener.start()
    try:
        for event in channel:
            print(
                f"intent={event.intent_id} user={event.user} usdc={event.usdc_amount} "
                f"strategy={event.strategy_id} block={event.block_number}"
            )
    except KeyboardInterrupt:
        pass
    finally:
        listener.stop()


if __name__ == "__main__":
    main()
