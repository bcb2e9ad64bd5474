"""Tests for the provider request types."""

from __future__ import annotations

import pytest

from repoagent.providers.types import ROLES, ChatMessage


@pytest.mark.parametrize("role", ROLES)
def test_chat_message_accepts_known_roles(role):
    assert ChatMessage(role, "hi").role == role


def test_chat_message_rejects_unknown_role():
    with pytest.raises(ValueError, match="Unknown message role 'tool'"):
        ChatMessage("tool", "hi")
