import asyncio
import json
import unittest

import httpx

from chat_gateway.errors import InvalidResponseError, ProviderError
from chat_gateway.providers import HuggingFaceProvider, LocalProvider, OpenAIProvider
from chat_gateway.types import Message

_CONVERSATION = [
    Message(role="system", content="be brief"),
    Message(role="user", content="hi"),
    Message(role="assistant", content="hello"),
    Message(role="user", content="bye"),
]


async def _call(provider, messages=_CONVERSATION, model=None) -> str:
    async with provider:
        return await provider.call(messages, model)


class HuggingFaceProviderTests(unittest.TestCase):
    def _provider(self, handler) -> HuggingFaceProvider:
        return HuggingFaceProvider(
            api_key="hf-key",
            base_url="https://hf.example/models/m",
            transport=httpx.MockTransport(handler),
        )

    def test_flattens_conversation_into_prompt(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"generated_text": "ok"})

        asyncio.run(_call(self._provider(handler)))

        body = json.loads(seen[0].content)
        self.assertEqual(
            body["inputs"], "system: be brief\nuser: hi\nassistant: hello\nuser: bye"
        )
        self.assertEqual(body["parameters"]["max_new_tokens"], 2000)
        self.assertEqual(body["parameters"]["temperature"], 0.7)
        self.assertEqual(seen[0].headers["authorization"], "Bearer hf-key")

    def test_reply_shapes(self) -> None:
        shapes = [
            ("plain string", "plain string"),
            ([{"generated_text": "from list"}], "from list"),
            ({"generated_text": "from object"}, "from object"),
        ]
        for body, expected in shapes:
            with self.subTest(body=body):
                provider = self._provider(lambda request, body=body: httpx.Response(200, json=body))
                self.assertEqual(asyncio.run(_call(provider)), expected)

    def test_unrecognized_shape_is_invalid(self) -> None:
        for body in ([], [{"text": "x"}], {"outputs": "x"}, 42, {"generated_text": ""}):
            with self.subTest(body=body):
                provider = self._provider(lambda request, body=body: httpx.Response(200, json=body))
                with self.assertRaises(InvalidResponseError):
                    asyncio.run(_call(provider))


class CompletionProviderTests(unittest.TestCase):
    def test_openai_default_model_and_error_detail(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(429, json={"error": {"message": "Rate limit reached"}})

        provider = OpenAIProvider(api_key="sk", transport=httpx.MockTransport(handler))

        with self.assertRaises(ProviderError) as ctx:
            asyncio.run(_call(provider))

        self.assertEqual(ctx.exception.status_code, 429)
        self.assertEqual(ctx.exception.detail, "Rate limit reached")
        self.assertEqual(json.loads(seen[0].content)["model"], "gpt-3.5-turbo")
        self.assertEqual(len(json.loads(seen[0].content)["messages"]), 4)

    def test_error_body_snippet_is_truncated(self) -> None:
        provider = LocalProvider(
            base_url="http://local:8080",
            transport=httpx.MockTransport(lambda request: httpx.Response(500, text="x" * 1000)),
        )

        with self.assertRaises(ProviderError) as ctx:
            asyncio.run(_call(provider))

        self.assertEqual(len(ctx.exception.detail), 200)

    def test_local_falls_back_to_literal_default_model(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"choices": [{"message": {"content": "hey"}}]})

        provider = LocalProvider(base_url="http://local:8080", transport=httpx.MockTransport(handler))

        self.assertEqual(asyncio.run(_call(provider)), "hey")
        self.assertEqual(json.loads(seen[0].content)["model"], "default")
        self.assertNotIn("authorization", seen[0].headers)

    def test_non_json_success_is_invalid(self) -> None:
        provider = LocalProvider(
            base_url="http://local:8080",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>")),
        )

        with self.assertRaises(InvalidResponseError):
            asyncio.run(_call(provider))

    def test_empty_content_is_invalid(self) -> None:
        provider = OpenAIProvider(
            api_key="sk",
            transport=httpx.MockTransport(
                lambda request: httpx.Response(200, json={"choices": [{"message": {"content": ""}}]})
            ),
        )

        with self.assertRaises(InvalidResponseError):
            asyncio.run(_call(provider))

    def test_local_list_models_preserves_order(self) -> None:
        provider = LocalProvider(
            base_url="http://local:8080",
            transport=httpx.MockTransport(
                lambda request: httpx.Response(
                    200, json={"object": "list", "data": [{"id": "z"}, {"id": "a"}, {"id": "m"}]}
                )
            ),
        )

        async def scenario() -> list[str]:
            async with provider:
                return await provider.list_models(timeout_s=1.0)

        self.assertEqual(asyncio.run(scenario()), ["z", "a", "m"])


if __name__ == "__main__":
    unittest.main()
