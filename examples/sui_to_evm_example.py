#!/usr/bin/env python3
"""
Example of driving a Sui -> EVM intent through the intent service.

The user's wallet signs depositForBurn itself; this script stands in for
the frontend by printing the parameters and reading the burn nonce from
stdin.
"""
import threading

from intentbridge import (
    CctpClient, CallbackNonceRegistry, CreateIntentRequest, Direction, InMemoryIntentStore,
    IntentOrchestrator, IntentService,
)


def main():
    """
    Demonstrate the non-custodial Sui -> EVM flow.

    This example shows how to:
    1. Wire the service with a nonce registry
    2. Create an intent without processing it
    3. Hand depositForBurn parameters to the signer
    4. Report the burn nonce and wait for completion
    """
    registry = CallbackNonceRegistry(timeout=900)
    orchestrator = IntentOrchestrator(CctpClient.testnet(), registry)
    service = IntentService(orchestrator, InMemoryIntentStore(), nonce_registry=registry)

    intent = service.create_intent(
        CreateIntentRequest(
            direction=Direction.SUI_TO_EVM,
            source_address="0x" + "ee" * 32,
            dest_address="0x70997970C51812dc3A010C7d01b50e0d17dc79C8",
            input_token="0x2::sui::SUI",
            input_amount="5000000",
        ),
        process=False,
    )
    print(f"Created intent {intent.id}")

    params = service.deposit_params(intent.id)
    print("Sign and submit depositForBurn with:")
    print(params.model_dump_json(indent=2))

    worker = threading.Thread(target=service.process_intent, args=(intent.id,))
    worker.start()

    nonce = input("Burn nonce: ").strip()
    tx_hash = input("Burn transaction hash (optional): ").strip() or None
    service.submit_bridge_nonce(intent.id, nonce, tx_hash)
    worker.join()

    result = service.get_intent(intent.id)
    print(f"Status: {result.status.value}")
    if result.error_message:
        print(f"Error: {result.error_message}")


if __name__ == "__main__":
    main()
