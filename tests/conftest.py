"""Shared fixtures: small PDFs and text documents built on the fly."""

import fitz
import pytest

from keysplit.document import backend as backend_module
from keysplit.document.formats.text import TextBackend, TextReader
from keysplit.exceptions import InputError


def page_text(key):
    """Text of one statement page; None gives a page without an account line."""
    if key is None:
        return "Statement continued\nTransactions\n"
    return f"Statement\nAccount: {key}\nBalance due\n"


@pytest.fixture
def make_pdf(tmp_path):
    """Build a PDF whose pages carry the given account keys."""

    def _make(keys, name="bundle.pdf", rotations=None):
        doc = fitz.open()
        for index, key in enumerate(keys):
            page = doc.new_page()
            page.insert_text((72, 72), page_text(key))
            if rotations and rotations[index]:
                page.set_rotation(rotations[index])
        path = tmp_path / name
        doc.save(str(path))
        doc.close()
        return path

    return _make


@pytest.fixture
def make_text(tmp_path):
    """Build a form-feed paged text document with the given account keys."""

    def _make(keys, name="bundle.txt"):
        path = tmp_path / name
        path.write_text("\f".join(page_text(key) for key in keys), encoding="utf-8")
        return path

    return _make


@pytest.fixture
def out_dir(tmp_path):
    path = tmp_path / "out"
    path.mkdir()
    return path


def pdf_texts(path):
    """Text of every page of a PDF."""
    with fitz.open(str(path)) as doc:
        return [page.get_text() for page in doc]


class FlakyTextReader(TextReader):
    """Text reader whose extraction breaks on page 3."""

    broken_page = 3

    def page_text(self, page):
        if page == self.broken_page:
            raise InputError(f"Text extraction failed on page {page} of {self.path}")
        return super().page_text(page)


class FlakyTextBackend(TextBackend):
    name = "flaky"
    supported_formats = [".flaky"]

    def open_reader(self, path, encoding=None, **kwargs):
        return FlakyTextReader(path, encoding=encoding)


@pytest.fixture
def make_flaky(tmp_path, monkeypatch):
    """Build a text document that cannot be read past page 2."""
    monkeypatch.setitem(backend_module._backends, "flaky", FlakyTextBackend)

    def _make(keys, name="bundle.flaky"):
        path = tmp_path / name
        path.write_text("\f".join(page_text(key) for key in keys), encoding="utf-8")
        return path

    return _make
