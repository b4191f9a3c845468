"""FastAPI web service for Markdown to print-HTML conversion.

Endpoints::

    POST /convert       Upload a .md note and receive the HTML page.
    POST /convert/text  Send raw Markdown text, receive the HTML page.
    GET  /health        Health check.
    GET  /variants      List available theme variants.

Notes are converted without vault theming; the service never reads the
server's file system.

Run::

    uvicorn md2print.server:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import HTMLResponse

from md2print import __version__
from md2print.converter import Converter
from md2print.errors import UnsupportedConstructError
from md2print.page import PageOptions
from md2print.value_store import ThemeVariant

app = FastAPI(
    title="md2print",
    description="Obsidian note to print-ready HTML conversion service",
    version=__version__,
)


def _converter(theme: str) -> Converter:
    try:
        variant = ThemeVariant(theme)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown theme variant {theme!r}")
    return Converter(PageOptions(variant=variant))


def _convert(converter: Converter, markdown: str, title: str) -> HTMLResponse:
    try:
        html = converter.convert_text(markdown, title=title)
    except UnsupportedConstructError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return HTMLResponse(content=html)


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


@app.get("/variants")
async def list_variants() -> dict[str, list[str]]:
    """List available theme variants."""
    return {"variants": [v.value for v in ThemeVariant]}


@app.post("/convert", response_class=HTMLResponse)
async def convert_file(
    file: UploadFile = File(...),
    theme: str = Form("light"),
    encoding: str = Form("utf-8"),
) -> HTMLResponse:
    """Upload a Markdown note and receive the HTML page back.

    - **file**: Markdown file (.md)
    - **theme**: Theme variant (light, dark)
    - **encoding**: Source file encoding
    """
    converter = _converter(theme)
    raw = await file.read()
    try:
        md_text = raw.decode(encoding)
    except (LookupError, UnicodeDecodeError) as exc:
        raise HTTPException(status_code=400, detail=f"Cannot decode upload: {exc}")

    title = (file.filename or "document.md").rsplit(".", 1)[0]
    return _convert(converter, md_text, title)


@app.post("/convert/text", response_class=HTMLResponse)
async def convert_text(
    markdown: str = Form(...),
    theme: str = Form("light"),
) -> HTMLResponse:
    """Send raw Markdown text and receive the HTML page.

    - **markdown**: Markdown source text
    - **theme**: Theme variant
    """
    return _convert(_converter(theme), markdown, "document")
