#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Redis 缓存镜像测试（redis 客户端全部 Mock）
"""

import json
import pytest
from unittest.mock import MagicMock

from bazi_engine.utils.cache_mirror import MirrorStatus, RedisCacheMirror


async def _scan(keys):
    for key in keys:
        yield key


class TestRedisCacheMirror:

    @pytest.mark.asyncio
    async def test_get_hit(self, mock_redis_client):
        mock_redis_client.get.return_value = json.dumps({"pillars": {"year": {}}}).encode("utf-8")
        mirror = RedisCacheMirror(mock_redis_client)
        result = await mirror.get("1990-5-15-14-male")
        assert result.status is MirrorStatus.HIT
        assert result.value == {"pillars": {"year": {}}}
        mock_redis_client.get.assert_awaited_once_with("bazi_calc:1990-5-15-14-male")

    @pytest.mark.asyncio
    async def test_get_miss(self, mock_redis_client):
        result = await RedisCacheMirror(mock_redis_client).get("k")
        assert result.status is MirrorStatus.MISS

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [b"not json", b"\xff\xfe"])
    async def test_get_undecodable(self, mock_redis_client, payload):
        mock_redis_client.get.return_value = payload
        result = await RedisCacheMirror(mock_redis_client).get("k")
        assert result.status is MirrorStatus.INVALID

    @pytest.mark.asyncio
    async def test_get_error_is_not_raised(self, mock_redis_client):
        mock_redis_client.get.side_effect = ConnectionError("refused")
        result = await RedisCacheMirror(mock_redis_client).get("k")
        assert result.status is MirrorStatus.ERROR
        assert isinstance(result.error, ConnectionError)

    @pytest.mark.asyncio
    async def test_set_with_ttl(self, mock_redis_client):
        mirror = RedisCacheMirror(mock_redis_client, key_prefix="t:")
        result = await mirror.set("k", {"a": "甲"}, 1000)
        assert result.status is MirrorStatus.OK
        mock_redis_client.set.assert_awaited_once_with("t:k", json.dumps({"a": "甲"}, ensure_ascii=False), px=1000)

    @pytest.mark.asyncio
    async def test_set_without_ttl(self, mock_redis_client):
        await RedisCacheMirror(mock_redis_client).set("k", {"a": 1}, 0)
        assert mock_redis_client.set.await_args.kwargs["px"] is None

    @pytest.mark.asyncio
    async def test_set_error_is_not_raised(self, mock_redis_client):
        mock_redis_client.set.side_effect = TimeoutError()
        result = await RedisCacheMirror(mock_redis_client).set("k", {"a": 1}, 10)
        assert result.status is MirrorStatus.ERROR

    @pytest.mark.asyncio
    async def test_delete(self, mock_redis_client):
        result = await RedisCacheMirror(mock_redis_client).delete("k")
        assert result.status is MirrorStatus.OK
        mock_redis_client.delete.assert_awaited_once_with("bazi_calc:k")

    @pytest.mark.asyncio
    async def test_clear_deletes_in_batches(self, mock_redis_client):
        keys = [b"bazi_calc:a", b"bazi_calc:b", b"bazi_calc:c"]
        mock_redis_client.scan_iter = MagicMock(return_value=_scan(keys))
        mirror = RedisCacheMirror(mock_redis_client, scan_count=2)
        result = await mirror.clear()
        assert result.status is MirrorStatus.OK
        mock_redis_client.scan_iter.assert_called_once_with(match="bazi_calc:*", count=2)
        calls = [c.args for c in mock_redis_client.delete.await_args_list]
        assert calls == [(b"bazi_calc:a", b"bazi_calc:b"), (b"bazi_calc:c",)]

    @pytest.mark.asyncio
    async def test_clear_error_is_not_raised(self, mock_redis_client):
        mock_redis_client.scan_iter = MagicMock(side_effect=ConnectionError("refused"))
        result = await RedisCacheMirror(mock_redis_client).clear()
        assert result.status is MirrorStatus.ERROR
