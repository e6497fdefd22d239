# scripts/tests_smoketest.py
# Run against a live relay: python -m relay.run_relay, then python scripts/tests_smoketest.py
from __future__ import annotations
import asyncio, json, os, uuid

from websockets.asyncio.client import connect

URI = os.environ.get("CHAT_RELAY_URI", "ws://127.0.0.1:10000")

async def recv(ws, timeout: float = 3) -> dict:
    return json.loads(await asyncio.wait_for(ws.recv(), timeout=timeout))

async def emit(ws, event: str, *args):
    await ws.send(json.dumps({"type": event, "args": list(args)}))

async def user_client(name: str, address: str = ""):
    ws = await connect(URI, open_timeout=3)
    await emit(ws, "join-chat", name, address, "normal")
    print(f"[{name}] joined chat-normal")
    return ws

async def run_smoke_test():
    print("Starting smoke test against", URI)

    # random wallet so reruns don't hit a badge from a previous run
    address = "0x" + uuid.uuid4().hex[:40]

    alice = await user_client("alice", address)
    bob   = await user_client("bob")

    # Bob talks in the normal room, both should see it exactly once
    ts = "2025-01-01T00:00:00.000Z"
    await emit(bob, "send-message", "hello from bob", "bob", "", "normal", ts)
    await emit(bob, "send-message", "hello from bob", "bob", "", "normal", ts)  # retry
    for name, ws in (("alice", alice), ("bob", bob)):
        msg = await recv(ws)
        assert msg["type"] == "new-message", msg
        assert msg["args"][0]["message"] == "hello from bob", msg
        print(f"[{name}] got normal message")

    # Alice has no badge yet -> private system notice
    await emit(alice, "send-message", "vip?", "alice", address, "vip")
    notice = await recv(alice)
    assert notice["args"][0]["username"] == "System", notice
    print("[alice] VIP send refused without badge")

    # Badge arrives from another connection -> global update + VIP welcome for alice
    await emit(bob, "badge-update", address, True)
    assert (await recv(bob))["type"] == "badge-update"
    assert (await recv(alice))["type"] == "badge-update"
    welcome = await recv(alice)
    assert welcome["args"][1] == "vip", welcome
    print("[alice] welcomed to VIP")

    await emit(alice, "send-message", "gm vips", "alice", "", "vip")
    vip = await recv(alice)
    assert vip["args"][0]["chatType"] == "vip", vip

    print("Smoke test OK: fan-out, dedup, VIP gate and badge grant behave.")

    await alice.close()
    await bob.close()


if __name__ == "__main__":
    asyncio.run(run_smoke_test())
