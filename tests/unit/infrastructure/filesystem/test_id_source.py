import pytest

from bulkdelete.domain.models.common import FilePath
from bulkdelete.domain.models.errors import IdSourceError
from bulkdelete.infrastructure.filesystem.id_source import FileIdSource, parse_entity_ids
from bulkdelete.infrastructure.filesystem.local_fs import LocalFileSystem

def test_comment_lines_are_excluded():
    assert parse_entity_ids(["# note", "id1", "id2"]) == ["id1", "id2"]

def test_blank_lines_and_whitespace_are_ignored():
    assert parse_entity_ids(["id1  ", "", "   ", "id2", "", ""]) == ["id1", "id2"]

def test_only_leading_hash_marks_a_comment():
    assert parse_entity_ids(["auth0|abc#1", "#auth0|def"]) == ["auth0|abc#1"]

@pytest.mark.asyncio
@pytest.mark.parametrize("newline", ["\n", "\r\n", "\r"])
async def test_reads_any_line_ending(tmp_path, newline):
    path = tmp_path / "entity_ids.delete"
    path.write_bytes(newline.join(["# users to purge", "u1", "u2", "u3", "", ""]).encode())
    source = FileIdSource(FilePath(str(path)), LocalFileSystem())

    assert await source.read_ids() == ["u1", "u2", "u3"]

@pytest.mark.asyncio
async def test_missing_file_raises_id_source_error(tmp_path):
    source = FileIdSource(FilePath(str(tmp_path / "missing.delete")), LocalFileSystem())

    with pytest.raises(IdSourceError, match="missing.delete"):
        await source.read_ids()
