"""Test helpers to stub the OpenAI Responses client used by ``remote.py``.

``OpenAIStub`` mirrors the small slice of ``openai.OpenAI`` the extractor
touches: ``client.responses.create(**kwargs)`` returning an object with an
``output_text`` attribute. Tests hand it either a JSON-able body, a raw string
(for malformed-output cases) or an exception to raise.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from sms_extraction.prompting import BEGIN_SMS, END_SMS


def extract_sms_from_user_content(user_content: str) -> str:
    """Return the message text embedded between the SMS markers."""

    b = user_content.find(BEGIN_SMS)
    e = user_content.rfind(END_SMS)
    if b == -1 or e == -1 or e <= b:
        raise AssertionError("remote: user content missing embedded SMS block")
    return user_content[b + len(BEGIN_SMS) : e]


class _Resp:
    output_text: str

    def __init__(self, text: str) -> None:
        self.output_text = text


class FakeRemote:
    """In-process :class:`~sms_extraction.remote.RemoteExtractor` for orchestrator tests."""

    def __init__(self, body: Any = None, *, error: Exception | None = None) -> None:
        self._body = body
        self._error = error
        self.calls: list[tuple[str, str | None]] = []

    def extract(self, sms_text: str, sender_hint: str | None) -> Any:
        self.calls.append((sms_text, sender_hint))
        if self._error is not None:
            raise self._error
        return self._body


class OpenAIStub:
    """Minimal stub matching ``openai.OpenAI`` shape for ``remote.py``.

    Parameters
    ----------
    body:
        Mapping serialized to JSON for ``output_text``, or a ``str`` used
        verbatim.
    error:
        When given, ``responses.create`` raises it instead of answering.
    calls_out:
        A list appended with each call's kwargs.
    init_kwargs_out:
        A list appended with the kwargs each client was constructed with.
    """

    def __init__(
        self,
        body: Mapping[str, Any] | str | None = None,
        *,
        error: Exception | None = None,
        calls_out: list[dict[str, Any]] | None = None,
        init_kwargs_out: list[dict[str, Any]] | None = None,
    ) -> None:
        self._body = body
        self._error = error
        self.calls = calls_out if calls_out is not None else []
        self.init_kwargs = init_kwargs_out if init_kwargs_out is not None else []

    def client_factory(self):
        """Return a callable to monkeypatch ``sms_extraction.remote.OpenAI``."""

        outer = self

        class _Responses:
            def create(self, **kwargs):
                outer.calls.append(kwargs)
                if outer._error is not None:
                    raise outer._error
                text = outer._body if isinstance(outer._body, str) else json.dumps(outer._body)
                return _Resp(text)

        class _Client:
            def __init__(self, *a: Any, **kw: Any) -> None:
                outer.init_kwargs.append(kw)
                self.responses = _Responses()

        return _Client
