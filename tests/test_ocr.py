import base64
import time

import pytest
from PIL import Image

from catalog_api.chat import OCR_FAILED, ChatIntentRouter
from catalog_api.errors import InvalidArgument, UpstreamFailure
from catalog_api.ocr import TrOcrEngine, decode_image

from .conftest import FakeLookup, png_base64


def engine_with(monkeypatch, model, timeout=5.0):
    engine = TrOcrEngine(model_name="unused", timeout=timeout, workers=2)
    monkeypatch.setattr(engine, "_get_pipeline", lambda: model)
    return engine


def test_recognize_joins_generated_text(monkeypatch):
    engine = engine_with(monkeypatch, lambda image: [{"generated_text": " CHAPTER ONE "}])
    assert engine.recognize(png_base64()) == "CHAPTER ONE"


def test_recognize_times_out(monkeypatch):
    def slow_model(image):
        time.sleep(0.5)
        return [{"generated_text": "too late"}]

    engine = engine_with(monkeypatch, slow_model, timeout=0.05)
    with pytest.raises(UpstreamFailure):
        engine.recognize(png_base64())

    response = ChatIntentRouter(engine, FakeLookup()).route(image=png_base64())
    assert response.text == OCR_FAILED


def test_timed_out_inference_does_not_block_next_request(monkeypatch):
    calls = []

    def first_call_hangs(image):
        calls.append(image)
        if len(calls) == 1:
            time.sleep(1.0)
        return [{"generated_text": "second page"}]

    engine = engine_with(monkeypatch, first_call_hangs, timeout=0.2)
    with pytest.raises(UpstreamFailure):
        engine.recognize(png_base64())
    assert engine.recognize(png_base64()) == "second page"


def test_recognize_wraps_model_errors(monkeypatch):
    def broken_model(image):
        raise RuntimeError("CUDA out of memory")

    engine = engine_with(monkeypatch, broken_model)
    with pytest.raises(UpstreamFailure):
        engine.recognize(png_base64())

    response = ChatIntentRouter(engine, FakeLookup()).route(image=png_base64())
    assert response.text == OCR_FAILED


def test_oversized_image_is_rejected(monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
    with pytest.raises(InvalidArgument):
        decode_image(png_base64())

    engine = engine_with(monkeypatch, lambda image: [{"generated_text": "unreachable"}])
    response = ChatIntentRouter(engine, FakeLookup()).route(image=png_base64())
    assert response.text == OCR_FAILED


def test_raw_bytes_payload():
    raw = base64.b64decode(png_base64())
    assert decode_image(raw).size == (8, 8)
    assert decode_image(bytearray(raw)).mode == "RGB"
