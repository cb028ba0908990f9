"""Raw request body capture.

Consumers such as webhook signature checks need the exact bytes the client
sent, before any pipe rewrites the payload. RawBodyMiddleware buffers the body
into scope state (request.state.raw_body) and replays it downstream.

Pure ASGI; request.state reads the same scope["state"] dict.
"""

from starlette.types import ASGIApp, Message, Receive, Scope, Send


async def read_body(receive: Receive) -> bytes:
    """Drain all http.request messages and return the joined body."""
    chunks: list[bytes] = []
    while True:
        message = await receive()
        if message["type"] != "http.request":
            # Disconnect before the body finished; leave it to the app
            break
        chunks.append(message.get("body", b""))
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


def replay_body(body: bytes, receive: Receive) -> Receive:
    """Build a receive callable that yields body once, then defers to receive."""
    sent = False

    async def replay() -> Message:
        nonlocal sent
        if not sent:
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay


def scope_state(scope: Scope) -> dict:
    """Return the per-request state dict backing request.state."""
    return scope.setdefault("state", {})


class RawBodyMiddleware:
    """Store the unparsed request body on request.state.raw_body."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        body = await read_body(receive)
        scope_state(scope)["raw_body"] = body
        await self.app(scope, replay_body(body, receive), send)
