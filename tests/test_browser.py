import hashlib
import io
import json
import threading
import urllib.error
import urllib.request
import zipfile

import pytest

from dxforge.browser import (
    FileContent,
    FileNode,
    build_file_tree,
    build_zip,
    detect_language,
    main,
    make_server,
    read_file_bytes,
    read_file_content,
)

LIB_RS = b"pub fn factorial(n: u64) -> u64 { 1 }\n"
README = b"# Forge Demo\n"
CONFIG = b"[forge]\n"


@pytest.fixture
def repo(tmp_path):
    root = tmp_path / "demo"
    (root / "src").mkdir(parents=True)
    (root / "src" / "lib.rs").write_bytes(LIB_RS)
    (root / "README.md").write_bytes(README)
    (root / ".hidden").write_bytes(b"skip me")
    (root / ".forge").mkdir()
    (root / ".forge" / "config.toml").write_bytes(CONFIG)
    return root


@pytest.fixture
def server(repo):
    srv = make_server(repo, "127.0.0.1", 0)
    thread = threading.Thread(target=srv.serve_forever, daemon=True)
    thread.start()
    host, port = srv.server_address[:2]
    yield f"http://{host}:{port}"
    srv.shutdown()
    srv.server_close()
    thread.join(timeout=5)


@pytest.mark.parametrize(
    "path, language",
    [
        ("src/main.rs", "rust"),
        ("app.js", "javascript"),
        ("a.cc", "cpp"),
        ("a.cxx", "cpp"),
        ("conf.yml", "yaml"),
        ("run.bash", "bash"),
        ("README.md", "markdown"),
        ("Makefile", "plaintext"),
        ("data.unknown", "plaintext"),
    ],
)
def test_detect_language(path, language):
    assert detect_language(path) == language


def test_file_node_to_dict_uses_type_key():
    node = FileNode(name="a.rs", path="src/a.rs", node_type="file", size=3, hash="abc")
    data = node.to_dict()
    assert data["type"] == "file"
    assert data["children"] is None
    assert data["path"] == "src/a.rs"


def test_tree_root_and_ordering(repo):
    tree = build_file_tree(repo, repo)
    assert tree.node_type == "directory"
    assert tree.path == ""
    names = [child.name for child in tree.children]
    assert names == [".forge", "src", "README.md"]
    assert ".hidden" not in names


def test_tree_file_hash_and_size(repo):
    tree = build_file_tree(repo)
    src = next(c for c in tree.children if c.name == "src")
    lib = src.children[0]
    assert lib.path == "src/lib.rs"
    assert lib.size == len(LIB_RS)
    assert lib.hash == hashlib.sha256(LIB_RS).hexdigest()
    assert lib.children is None


def test_tree_missing_path_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        build_file_tree(tmp_path, tmp_path / "nope")


def test_read_file_content(repo):
    content = read_file_content(repo, "/src/lib.rs")
    assert isinstance(content, FileContent)
    assert content.path == "src/lib.rs"
    assert content.content == LIB_RS.decode()
    assert content.language == "rust"
    assert content.size == len(LIB_RS)
    assert content.hash == hashlib.md5(LIB_RS).hexdigest()


def test_read_file_content_missing(repo):
    with pytest.raises(FileNotFoundError):
        read_file_content(repo, "missing.txt")


def test_read_file_outside_root_rejected(repo):
    with pytest.raises(FileNotFoundError):
        read_file_bytes(repo, "../outside.txt")


def test_read_file_bytes(repo):
    assert read_file_bytes(repo, "README.md") == README


def test_build_zip_round_trip(repo):
    data = build_zip(repo)
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        names = set(archive.namelist())
        assert "src/" in names
        assert "src/lib.rs" in names
        assert ".forge/config.toml" in names
        assert ".hidden" not in names
        assert archive.read("src/lib.rs") == LIB_RS
        assert archive.read("README.md") == README
        assert archive.getinfo("src/lib.rs").compress_type == zipfile.ZIP_DEFLATED


def test_server_index(server):
    with urllib.request.urlopen(server + "/") as response:
        body = response.read().decode()
    assert "File Browser" in body


def test_server_tree(server):
    with urllib.request.urlopen(server + "/api/tree") as response:
        data = json.loads(response.read())
    assert data["type"] == "directory"
    assert [c["name"] for c in data["children"]] == [".forge", "src", "README.md"]


def test_server_file(server):
    with urllib.request.urlopen(server + "/api/file/src/lib.rs") as response:
        data = json.loads(response.read())
    assert data["language"] == "rust"
    assert data["content"] == LIB_RS.decode()


def test_server_missing_file_is_404(server):
    with pytest.raises(urllib.error.HTTPError) as info:
        urllib.request.urlopen(server + "/api/file/nope.txt")
    assert info.value.code == 404


def test_server_download(server):
    with urllib.request.urlopen(server + "/api/download/src/lib.rs") as response:
        disposition = response.headers["Content-Disposition"]
        body = response.read()
    assert disposition == 'attachment; filename="lib.rs"'
    assert body == LIB_RS


def test_server_zip(server):
    request = urllib.request.Request(server + "/api/download-zip", method="POST", data=b"")
    with urllib.request.urlopen(request) as response:
        assert response.headers["Content-Type"] == "application/zip"
        data = response.read()
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        assert archive.read("README.md") == README


def test_main_rejects_missing_root(tmp_path):
    with pytest.raises(SystemExit) as info:
        main(["--root", str(tmp_path / "absent")])
    assert info.value.code == 2