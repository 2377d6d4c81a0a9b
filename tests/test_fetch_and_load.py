"""Tests for text fetching and the async/sync load entry points."""

import asyncio
import json
import threading

import numpy as np
import pytest
import requests

from tetfile.errors import FetchError, ParseError
from tetfile.loaders.fetch import fetch_text
from tetfile.loaders.tet_loader import load_tet, load_tet_file
from tetfile.loaders.tet_spec import TetSpec

from tet_samples import SINGLE_TRIANGLE


class FakeResponse:
    def __init__(self, status_code, text="", reason="OK"):
        self.status_code = status_code
        self.text = text
        self.reason = reason


class TestFetchText:

    def test_local_path(self, write_tet):
        path = write_tet(SINGLE_TRIANGLE)
        assert asyncio.run(fetch_text(path)) == SINGLE_TRIANGLE
        assert asyncio.run(fetch_text(str(path))) == SINGLE_TRIANGLE

    def test_file_url(self, write_tet):
        path = write_tet(SINGLE_TRIANGLE)
        assert asyncio.run(fetch_text(path.as_uri())) == SINGLE_TRIANGLE

    def test_missing_file(self, tmp_path):
        with pytest.raises(FetchError) as info:
            asyncio.run(fetch_text(tmp_path / "absent.tet"))
        assert info.value.status is None

    def test_http_success(self, monkeypatch):
        calls = []

        def fake_get(url, timeout):
            calls.append((url, timeout))
            return FakeResponse(200, SINGLE_TRIANGLE)

        monkeypatch.setattr(requests, "get", fake_get)

        text = asyncio.run(fetch_text("https://example.com/model.tet", timeout=5.0))

        assert text == SINGLE_TRIANGLE
        assert calls == [("https://example.com/model.tet", 5.0)]

    def test_http_bad_status(self, monkeypatch):
        monkeypatch.setattr(requests, "get", lambda url, timeout: FakeResponse(404, reason="Not Found"))

        with pytest.raises(FetchError) as info:
            asyncio.run(fetch_text("http://example.com/missing.tet"))

        assert info.value.status == 404
        assert "Not Found" in str(info.value)

    def test_http_transport_failure(self, monkeypatch):
        def fake_get(url, timeout):
            raise requests.ConnectionError("connection refused")

        monkeypatch.setattr(requests, "get", fake_get)

        with pytest.raises(FetchError) as info:
            asyncio.run(fetch_text("http://example.com/model.tet"))
        assert "connection refused" in info.value.reason


class TestLoad:

    def test_load_tet_local(self, write_tet):
        path = write_tet(SINGLE_TRIANGLE, "triangle.tet")

        mesh = asyncio.run(load_tet(path))

        assert mesh.name == "triangle"
        assert mesh.triangle_count == 1
        np.testing.assert_allclose(mesh.normals_buffer.reshape(-1, 3), [[0, 0, 1]] * 3, atol=1e-6)

    def test_load_tet_reads_meta_off_the_event_loop(self, write_tet, monkeypatch):
        path = write_tet(SINGLE_TRIANGLE)
        TetSpec(scale=2.0).save_for_mesh(path)
        threads = []
        original = TetSpec.for_mesh_file

        def recording(mesh_path):
            threads.append(threading.current_thread())
            return original(mesh_path)

        monkeypatch.setattr(TetSpec, "for_mesh_file", staticmethod(recording))

        mesh = asyncio.run(load_tet(path))

        assert mesh.spec.scale == 2.0
        assert len(threads) == 1
        assert threads[0] is not threading.main_thread()

    def test_load_tet_http(self, monkeypatch):
        monkeypatch.setattr(requests, "get", lambda url, timeout: FakeResponse(200, SINGLE_TRIANGLE))

        mesh = asyncio.run(load_tet("https://example.com/data/donut.tet?v=2"))

        assert mesh.name == "donut"
        assert mesh.tets_indices.tolist() == [0, 1, 2, 0]

    def test_load_tet_propagates_parse_error(self, write_tet):
        path = write_tet("v 0 0 zero\n")
        with pytest.raises(ParseError):
            asyncio.run(load_tet(path))

    def test_load_tet_file_reads_meta(self, write_tet):
        path = write_tet(SINGLE_TRIANGLE)
        TetSpec(scale=3.0).save_for_mesh(path)

        mesh = load_tet_file(path)

        assert mesh.spec.scale == 3.0
        np.testing.assert_allclose(mesh.vertex_positions[1], [3, 0, 0])

    def test_explicit_spec_wins_over_meta(self, write_tet):
        path = write_tet(SINGLE_TRIANGLE)
        TetSpec(scale=3.0).save_for_mesh(path)

        mesh = load_tet_file(path, TetSpec())

        np.testing.assert_allclose(mesh.vertex_positions[1], [1, 0, 0])

    def test_load_tet_file_missing(self, tmp_path):
        with pytest.raises(FetchError):
            load_tet_file(tmp_path / "nope.tet")


class TestTetSpecFile:

    def test_round_trip(self, tmp_path):
        spec = TetSpec(scale=0.01, axis_y="z", axis_z="-y", flip_uv_v=True, strict_degenerate=True)
        spec.save(tmp_path / "a.meta")
        assert TetSpec.load(tmp_path / "a.meta") == spec

    def test_missing_file_gives_defaults(self, tmp_path):
        assert TetSpec.load(tmp_path / "none.meta") == TetSpec()

    def test_broken_file_gives_defaults(self, tmp_path, caplog):
        path = tmp_path / "broken.meta"
        path.write_text("{not json", encoding="utf-8")

        assert TetSpec.load(path) == TetSpec()
        assert "broken.meta" in caplog.text

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "extra.meta"
        path.write_text(json.dumps({"scale": 2.0, "future_option": 1}), encoding="utf-8")
        assert TetSpec.load(path).scale == 2.0
