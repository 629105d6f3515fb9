import asyncio

from chat_gateway.client import ChatGateway
from chat_gateway.config import GatewaySettings
from chat_gateway.errors import NormalizedError
from chat_gateway.types import ChatRequest, Message


async def main() -> None:
    # Self-hosted only; nothing listens on this port, so discovery falls back.
    gateway = ChatGateway(
        GatewaySettings(local_llm_api_base="http://127.0.0.1:9", local_llm_model="llama-3")
    )

    print("Providers:", sorted(p.value for p in gateway.list_providers()))
    models = await gateway.list_models()
    print("Models:", [m.model_dump(mode="json") for m in models])

    req = ChatRequest(model_id="llama-3", messages=[Message(role="user", content="hi")])
    retry = gateway.retry_controller(base_delay_s=0.1)
    try:
        await retry.send(req, known_models=models)
    except NormalizedError as e:
        print("Expected error:", e.kind.value, "retryable" if e.retryable else "terminal")


if __name__ == "__main__":
    asyncio.run(main())
