"""
Pydantic models for the MemoMarket store.

This module defines all data models persisted or exchanged by the store:
- The application config record
- Rule packs and the rules and memos they embed
- Listing rows that merge a pack with its installed state
- The MemoChat exchange format

Field declaration order is the on-disk key order, since every model is
written with ``model_dump_json(indent=2)``.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Application Config
# ---------------------------------------------------------------------------


class Config(BaseModel):
    """
    Flat settings record stored in ``config.json``.

    The three connection strings are required: a file that lacks any of them
    is treated as corrupt and replaced by ``Config.empty()`` on load rather
    than being partially populated.
    """

    api_key: str = Field(description="API key for the chat model provider.")
    model_id: str = Field(description="Model identifier sent with each request.")
    base_url: str = Field(description="Base URL of the OpenAI-compatible endpoint.")
    reasoning_enabled: bool = Field(
        default=False,
        description="Whether reasoning output is requested from the model.",
    )
    channels_json: str = Field(
        default="",
        description="Serialized list of remote channels, owned by the front end.",
    )

    @classmethod
    def empty(cls) -> "Config":
        return cls(api_key="", model_id="", base_url="")


# ---------------------------------------------------------------------------
# Rule Packs
# ---------------------------------------------------------------------------


class MemoRule(BaseModel):
    """A title plus the instruction telling the assistant how to update a memo."""

    title: str
    update_rule: str


class Memo(BaseModel):
    """A memo entry shipped with a pack."""

    title: str
    content: str


class RulePack(BaseModel):
    """
    A named, versioned bundle of prompt rules, memos and metadata.

    ``id`` doubles as the storage file name stem and must pass
    ``pack_utils.validate_pack_id`` before it is turned into a path.
    ``created_at`` / ``updated_at`` are kept as strings; listing order relies on
    them being lexicographically sortable (ISO 8601).
    """

    id: str
    name: str
    description: str
    author: str
    version: str
    system_prompt: str
    rules: List[MemoRule]
    memos: List[Memo] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""


class PackListing(BaseModel):
    """A stored pack together with whether it is in the installed set."""

    pack: RulePack
    installed: bool = False


# ---------------------------------------------------------------------------
# MemoChat Exchange Format
# ---------------------------------------------------------------------------


class MemoChatRule(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    update_rule: str = Field(alias="updateRule")


class MemoChatPack(BaseModel):
    """
    The subset of a pack MemoChat understands:
    ``{"systemPrompt": ..., "rules": [{"title": ..., "updateRule": ...}]}``.
    """

    model_config = ConfigDict(populate_by_name=True)

    system_prompt: str = Field(default="", alias="systemPrompt")
    rules: List[MemoChatRule] = Field(default_factory=list)
