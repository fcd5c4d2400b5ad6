"""
device_auth — Pairing flow

Tokens issued by the gateway are filed under (device id, role).
Store after connect, load on reconnect, clear when the gateway
rejects them.
"""

import asyncio
import logging
import tempfile
from pathlib import Path

from device_auth import DeviceAuthStore, StoreConfigSchema

DEVICE_ID = "3f9a1c0e77b24d51"


# ─── Stand-in for the gateway (not part of the library) ───


def gateway_accepts(token: str) -> bool:
    return token != "tok-revoked"


async def main():
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)-7s %(name)s: %(message)s")

    with tempfile.TemporaryDirectory() as tmp:
        # ──────────────────────────────────────
        #  1. Build the store from configuration
        # ──────────────────────────────────────
        config = StoreConfigSchema(
            service="com.example.device-auth",
            backend="sqlite",
            path=str(Path(tmp) / "device_auth.db"),
        )
        store = DeviceAuthStore.from_config(config)

        try:
            # ──────────────────────────────────────
            #  2. After pairing: store issued tokens
            # ──────────────────────────────────────
            print("\n=== Pairing ===\n")
            operator = await store.store_token(
                DEVICE_ID, "Operator", "tok-operator", ["operator.read", " operator.write", ""]
            )
            await store.store_token(DEVICE_ID, "node", "tok-revoked", ["node.invoke"])
            if operator is None:
                print("  operator: token could not be stored")
            else:
                print(f"  role={operator.role}  scopes={operator.scopes}")

            # ──────────────────────────────────────
            #  3. Reconnect: load and present tokens
            # ──────────────────────────────────────
            print("\n=== Reconnect ===\n")
            for role in ("operator", "NODE", "viewer"):
                entry = await store.load_token(DEVICE_ID, role)
                if entry is None:
                    print(f"  {role}: no token, pairing required")
                    continue
                if gateway_accepts(entry.token):
                    print(f"  {role}: accepted (updated {entry.updated_at_ms})")
                else:
                    print(f"  {role}: rejected, clearing")
                    await store.clear_token(DEVICE_ID, role)

            # ──────────────────────────────────────
            #  4. Unpair: forget the whole device
            # ──────────────────────────────────────
            print("\n=== Unpair ===\n")
            await store.clear_all_tokens(DEVICE_ID)
            print(f"  operator after unpair: {await store.load_token(DEVICE_ID, 'operator')}")
        finally:
            await store.close()


if __name__ == "__main__":
    asyncio.run(main())
