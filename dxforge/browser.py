"""A small web file browser for a forge repository.

It serves a single-page UI with a JSON API: the file tree, file contents,
single-file downloads and a ZIP of the whole repository.
"""

from __future__ import annotations

import argparse
import hashlib
import io
import json
import logging
import os
import zipfile
from dataclasses import asdict, dataclass
from functools import partial
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
from urllib.parse import unquote, urlsplit

from .repository import count_files, initialize_repository

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

DEFAULT_ROOT = "examples/forge-demo"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000
ZIP_NAME = "forge-demo.zip"

_LANGUAGES = {
    "rs": "rust",
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "java": "java",
    "c": "c",
    "cpp": "cpp",
    "cc": "cpp",
    "cxx": "cpp",
    "go": "go",
    "rb": "ruby",
    "php": "php",
    "swift": "swift",
    "kt": "kotlin",
    "sh": "bash",
    "bash": "bash",
    "json": "json",
    "yaml": "yaml",
    "yml": "yaml",
    "toml": "toml",
    "xml": "xml",
    "html": "html",
    "css": "css",
    "md": "markdown",
    "sql": "sql",
}


@dataclass
class FileNode:
    """One entry of the file tree; directories carry their children."""

    name: str
    path: str
    node_type: str
    size: Optional[int] = None
    hash: Optional[str] = None
    children: Optional[List["FileNode"]] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready form, with the kind of node under ``type``."""
        return {
            "name": self.name,
            "path": self.path,
            "type": self.node_type,
            "size": self.size,
            "hash": self.hash,
            "children": (
                None if self.children is None else [c.to_dict() for c in self.children]
            ),
        }


@dataclass
class FileContent:
    """The text of one file with its size, MD5 digest and detected language."""

    path: str
    content: str
    size: int
    hash: str
    language: str


def detect_language(path: PathLike) -> str:
    """Highlighting language for a file, judged by its extension."""
    suffix = Path(path).suffix
    return _LANGUAGES.get(suffix[1:], "plaintext") if suffix else "plaintext"


def _is_hidden(name: str) -> bool:
    return name.startswith(".") and name != ".forge"


def _relative(root: Path, path: Path) -> str:
    try:
        rel = path.relative_to(root).as_posix()
    except ValueError:
        rel = str(path)
    rel = rel.replace("\\", "/").lstrip("/")
    return "" if rel == "." else rel


def _build(root: Path, path: Path) -> FileNode:
    info = path.stat()
    name = path.name or path.resolve().name
    relative = _relative(root, path)

    if path.is_dir():
        children: List[FileNode] = []
        for entry in sorted(path.iterdir()):
            if _is_hidden(entry.name):
                continue
            try:
                children.append(_build(root, entry))
            except OSError as exc:
                logger.debug("Skipping %s: %s", entry, exc)
        children.sort(key=lambda node: (node.node_type != "directory", node.name))
        return FileNode(name=name, path=relative, node_type="directory", children=children)

    digest = hashlib.sha256(path.read_bytes()).hexdigest()
    return FileNode(
        name=name, path=relative, node_type="file", size=info.st_size, hash=digest
    )


def build_file_tree(root: PathLike, path: Optional[PathLike] = None) -> FileNode:
    """Tree of ``path`` (default: ``root``) with paths relative to ``root``.

    Hidden entries other than ``.forge`` are left out; directories come
    before files, each group sorted by name.
    """
    root_path = Path(root)
    return _build(root_path, Path(path) if path is not None else root_path)


def _locate(root: PathLike, path: str) -> Tuple[str, Path]:
    root_path = Path(root)
    clean = path.lstrip("/").replace("\\", "/")
    full = root_path / clean
    resolved_root = root_path.resolve()
    resolved = full.resolve()
    if resolved != resolved_root and resolved_root not in resolved.parents:
        raise FileNotFoundError(f"{path!r} is outside the repository")
    return clean, full


def read_file_content(root: PathLike, path: str) -> FileContent:
    """Read a text file below ``root``.

    Raises FileNotFoundError (or another OSError) if it cannot be read and
    UnicodeDecodeError if it is not UTF-8 text.
    """
    clean, full = _locate(root, path)
    raw = full.read_bytes()
    content = raw.decode("utf-8")
    return FileContent(
        path=clean,
        content=content,
        size=full.stat().st_size,
        hash=hashlib.md5(raw).hexdigest(),
        language=detect_language(clean),
    )


def read_file_bytes(root: PathLike, path: str) -> bytes:
    """Raw bytes of a file below ``root``; raises OSError if unreadable."""
    _, full = _locate(root, path)
    return full.read_bytes()


def _add_directory(archive: zipfile.ZipFile, root: Path, directory: Path) -> None:
    for entry in sorted(directory.iterdir()):
        if _is_hidden(entry.name):
            continue
        relative = _relative(root, entry)
        if entry.is_dir():
            info = zipfile.ZipInfo(relative + "/")
            info.external_attr = (0o40755 << 16) | 0x10
            archive.writestr(info, b"")
            _add_directory(archive, root, entry)
        else:
            archive.write(entry, relative)


def build_zip(root: PathLike) -> bytes:
    """A deflated ZIP of everything below ``root`` except hidden entries."""
    root_path = Path(root)
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        _add_directory(archive, root_path, root_path)
    return buffer.getvalue()


class _BrowserHandler(BaseHTTPRequestHandler):
    def __init__(self, *args: Any, root: Path, **kwargs: Any) -> None:
        self.root = root
        super().__init__(*args, **kwargs)

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)

    def _send(
        self,
        status: HTTPStatus,
        body: bytes,
        content_type: str,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        for key, value in (headers or {}).items():
            self.send_header(key, value)
        self.end_headers()
        self.wfile.write(body)

    def _send_json(self, data: Any) -> None:
        body = json.dumps(data).encode("utf-8")
        self._send(HTTPStatus.OK, body, "application/json")

    def _send_status(self, status: HTTPStatus) -> None:
        self._send(status, status.phrase.encode("utf-8"), "text/plain; charset=utf-8")

    def _route(self) -> str:
        return unquote(urlsplit(self.path).path)

    def do_GET(self) -> None:
        route = self._route()
        if route == "/":
            self._send(HTTPStatus.OK, HTML_TEMPLATE.encode("utf-8"), "text/html; charset=utf-8")
        elif route == "/api/tree":
            self._tree()
        elif route.startswith("/api/file/"):
            self._file(route[len("/api/file/"):])
        elif route.startswith("/api/download/"):
            self._download(route[len("/api/download/"):])
        else:
            self._send_status(HTTPStatus.NOT_FOUND)

    def do_POST(self) -> None:
        if self._route() == "/api/download-zip":
            self._zip()
        else:
            self._send_status(HTTPStatus.NOT_FOUND)

    def _tree(self) -> None:
        try:
            tree = build_file_tree(self.root)
        except OSError as exc:
            logger.error("Failed to build file tree: %s", exc)
            self._send_status(HTTPStatus.INTERNAL_SERVER_ERROR)
            return
        self._send_json(tree.to_dict())

    def _file(self, path: str) -> None:
        try:
            content = read_file_content(self.root, path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to read file '%s': %s", path, exc)
            self._send_status(HTTPStatus.NOT_FOUND)
            return
        self._send_json(asdict(content))

    def _download(self, path: str) -> None:
        try:
            data = read_file_bytes(self.root, path)
        except OSError as exc:
            logger.error("Failed to read file '%s': %s", path, exc)
            self._send_status(HTTPStatus.NOT_FOUND)
            return
        filename = Path(path).name
        self._send(
            HTTPStatus.OK,
            data,
            "application/octet-stream",
            {"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    def _zip(self) -> None:
        try:
            data = build_zip(self.root)
        except OSError as exc:
            logger.error("Failed to build ZIP: %s", exc)
            self._send_status(HTTPStatus.INTERNAL_SERVER_ERROR)
            return
        self._send(
            HTTPStatus.OK,
            data,
            "application/zip",
            {"Content-Disposition": f'attachment; filename="{ZIP_NAME}"'},
        )


def make_server(
    root: PathLike, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT
) -> ThreadingHTTPServer:
    """An HTTP server browsing ``root``; call ``serve_forever`` to run it."""
    handler = partial(_BrowserHandler, root=Path(root))
    return ThreadingHTTPServer((host, port), handler)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="dxforge-browser", description="Browse a forge repository in the web browser."
    )
    parser.add_argument("--root", default=DEFAULT_ROOT, help="repository to serve")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)

    root = Path(args.root)
    if not root.is_dir():
        parser.error(f"repository directory not found: {root}")

    forge_path = root / ".dx" / "forge"
    if forge_path.exists():
        print(f"Using existing Forge storage at {forge_path}")
    else:
        print(f"Initializing Forge storage at {forge_path}")
        initialize_repository(root)
        print(f"Repository initialized with {count_files(root)} files")

    server = make_server(root, args.host, args.port)
    host, port = server.server_address[:2]
    print(f"Forge Web UI running at http://{host}:{port}")
    print(f"Serving: {root}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()
    return 0


HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Forge Demo - File Browser</title>
<style>
  body { margin: 0; background: #111827; color: #f3f4f6; font-family: sans-serif; }
  header { background: #1f2937; border-bottom: 1px solid #374151; padding: 1rem;
           display: flex; justify-content: space-between; align-items: center; }
  button { background: #2563eb; color: #fff; border: 0; padding: .5rem 1rem;
           border-radius: 4px; cursor: pointer; }
  button.zip { background: #16a34a; }
  .layout { display: flex; gap: 1rem; padding: 1.5rem; }
  aside { width: 25%; background: #1f2937; border-radius: 8px; padding: 1rem; }
  main { flex: 1; background: #1f2937; border-radius: 8px; padding: 1.5rem; }
  .item { padding: .2rem .5rem; border-radius: 4px; cursor: pointer; }
  .item:hover { background: #2d333b; }
  .item.active { background: #1f6feb; }
  .folder::before { content: "\\1F4C1  "; }
  .file::before { content: "\\1F4C4  "; }
  .children { margin-left: 1rem; }
  .hidden { display: none; }
  pre { margin: 0; overflow: auto; }
  code { font-family: Consolas, Monaco, monospace; font-size: 14px; }
  .meta { color: #9ca3af; font-size: .9rem; }
</style>
</head>
<body>
<header>
  <h1>Forge Demo</h1>
  <button class="zip" onclick="downloadZip()">Download ZIP</button>
</header>
<div class="layout">
  <aside><h2>Files</h2><div id="file-tree"></div></aside>
  <main>
    <div id="file-header" class="hidden">
      <h2 id="file-name"></h2>
      <p id="file-meta" class="meta"></p>
      <button onclick="downloadCurrentFile()">Download</button>
    </div>
    <div id="file-content"><p class="meta">Select a file to view its contents</p></div>
  </main>
</div>
<script>
let currentFile = null;

window.addEventListener('DOMContentLoaded', loadFileTree);

async function loadFileTree() {
  const container = document.getElementById('file-tree');
  try {
    const response = await fetch('/api/tree');
    renderFileTree(await response.json(), container);
  } catch (error) {
    container.textContent = 'Failed to load files';
  }
}

function renderFileTree(node, container) {
  if (node.type === 'directory' && node.children) {
    const header = document.createElement('div');
    header.className = 'item folder';
    header.textContent = node.name;
    const children = document.createElement('div');
    children.className = 'children';
    header.onclick = () => children.classList.toggle('hidden');
    node.children.forEach(child => renderFileTree(child, children));
    container.appendChild(header);
    container.appendChild(children);
  } else {
    const file = document.createElement('div');
    file.className = 'item file';
    file.textContent = node.name;
    file.onclick = (e) => loadFile(node.path, e.currentTarget);
    container.appendChild(file);
  }
}

async function loadFile(path, element) {
  const contentDiv = document.getElementById('file-content');
  try {
    const response = await fetch('/api/file/' + path);
    if (!response.ok) throw new Error(response.statusText);
    const data = await response.json();
    currentFile = data;
    document.getElementById('file-header').classList.remove('hidden');
    document.getElementById('file-name').textContent = path;
    document.getElementById('file-meta').textContent =
      formatBytes(data.size) + ' \\u2022 ' + data.language + ' \\u2022 ' + data.hash.substring(0, 8);
    const pre = document.createElement('pre');
    const code = document.createElement('code');
    code.textContent = data.content;
    pre.appendChild(code);
    contentDiv.replaceChildren(pre);
    document.querySelectorAll('.item').forEach(el => el.classList.remove('active'));
    if (element) element.classList.add('active');
  } catch (error) {
    contentDiv.textContent = 'Failed to load file';
  }
}

function downloadCurrentFile() {
  if (currentFile) window.location.href = '/api/download/' + currentFile.path;
}

async function downloadZip() {
  try {
    const response = await fetch('/api/download-zip', { method: 'POST' });
    const url = window.URL.createObjectURL(await response.blob());
    const a = document.createElement('a');
    a.href = url;
    a.download = 'forge-demo.zip';
    document.body.appendChild(a);
    a.click();
    window.URL.revokeObjectURL(url);
    document.body.removeChild(a);
  } catch (error) {
    alert('Failed to download ZIP');
  }
}

function formatBytes(bytes) {
  if (bytes === 0) return '0 Bytes';
  const k = 1024;
  const sizes = ['Bytes', 'KB', 'MB', 'GB'];
  const i = Math.floor(Math.log(bytes) / Math.log(k));
  return Math.round(bytes / Math.pow(k, i) * 100) / 100 + ' ' + sizes[i];
}
</script>
</body>
</html>
"""


if __name__ == "__main__":
    raise SystemExit(main())