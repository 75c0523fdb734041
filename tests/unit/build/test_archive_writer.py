"""
Unit tests for the archive writer.
"""

import io
import zipfile

import pytest

from aarbind.build.archive_writer import (
    FIXED_DATE_TIME,
    MANIFEST_HEADER,
    MANIFEST_NAME,
    ArchiveBuilder,
    JarWriter,
    NullSink,
    iter_tree,
    open_destination,
)
from aarbind.errors import PackagingIOError, ValidationError


@pytest.fixture
def source_tree(tmp_path):
    """Create a small tree with nested directories."""
    root = tmp_path / 'src'
    (root / 'go' / 'hello').mkdir(parents=True)
    (root / 'go' / 'Seq.java').write_text('class Seq {}')
    (root / 'go' / 'hello' / 'Hello.java').write_text('class Hello {}')
    (root / 'a.txt').write_text('a')
    return root


class TestIterTree:
    """Test suite for iter_tree."""

    def test_sorted_relative_names(self, source_tree):
        """Test that names are relative, slash separated and sorted."""
        names = [name for name, _ in iter_tree(source_tree)]

        assert names == ['a.txt', 'go/Seq.java', 'go/hello/Hello.java']

    def test_restartable(self, source_tree):
        """Test that the walk can be repeated with the same result."""
        assert list(iter_tree(source_tree)) == list(iter_tree(source_tree))

    def test_missing_root(self, tmp_path):
        """Test that a missing root is a packaging error."""
        with pytest.raises(PackagingIOError, match='source directory not found'):
            list(iter_tree(tmp_path / 'missing'))

    def test_skips_directories(self, tmp_path):
        """Test that empty directories produce no entries."""
        (tmp_path / 'empty').mkdir()

        assert list(iter_tree(tmp_path)) == []


class TestNullSink:
    """Test suite for NullSink."""

    def test_counts_bytes(self):
        """Test that writes are counted and discarded."""
        sink = NullSink()

        assert sink.write(b'abc') == 3
        assert sink.write(b'de') == 2
        assert sink.tell() == 5

    def test_accepts_zip_output(self):
        """Test that a whole archive can be written into the sink."""
        sink = NullSink()
        with ArchiveBuilder(sink) as builder:
            builder.add_bytes('a.txt', b'hello')
            builder.add_directory('res/')

        assert sink.tell() > 0


class TestOpenDestination:
    """Test suite for open_destination."""

    def test_dry_run_creates_nothing(self, tmp_path):
        """Test that dry-run destinations never touch the filesystem."""
        target = tmp_path / 'out' / 'x.aar'
        with open_destination(target, dry_run=True) as fp:
            fp.write(b'data')

        assert not target.exists()
        assert not target.parent.exists()

    def test_creates_parent(self, tmp_path):
        """Test that missing parent directories are created."""
        target = tmp_path / 'out' / 'x.jar'
        with open_destination(target) as fp:
            fp.write(b'data')

        assert target.read_bytes() == b'data'

    def test_unwritable(self, tmp_path):
        """Test that an unwritable destination is a packaging error."""
        blocker = tmp_path / 'file'
        blocker.write_text('')

        with pytest.raises(PackagingIOError, match='cannot create'):
            with open_destination(blocker / 'x.jar'):
                pass


class TestArchiveBuilder:
    """Test suite for ArchiveBuilder."""

    def test_entries_in_order(self, tmp_path):
        """Test that entries appear in the order they were added."""
        data = tmp_path / 'data.bin'
        data.write_bytes(b'\x00\x01')
        buf = io.BytesIO()

        with ArchiveBuilder(buf) as builder:
            builder.add_bytes('first.txt', 'text')
            builder.add_file('second.bin', data)
            builder.add_directory('res')

        with zipfile.ZipFile(io.BytesIO(buf.getvalue())) as zf:
            assert zf.namelist() == ['first.txt', 'second.bin', 'res/']
            assert zf.read('first.txt') == b'text'
            assert zf.read('second.bin') == b'\x00\x01'
            assert zf.getinfo('first.txt').date_time == FIXED_DATE_TIME

    def test_duplicate_entry(self):
        """Test that adding the same name twice is rejected."""
        with ArchiveBuilder(io.BytesIO()) as builder:
            builder.add_bytes('a.txt', b'')
            with pytest.raises(ValidationError, match='duplicate archive entry'):
                builder.add_bytes('a.txt', b'')

    def test_missing_file(self, tmp_path):
        """Test that an unreadable source is a packaging error."""
        with ArchiveBuilder(io.BytesIO()) as builder:
            with pytest.raises(PackagingIOError, match='failed to add'):
                builder.add_file('x', tmp_path / 'missing')

    def test_verbose_echo(self, capsys):
        """Test that verbose mode echoes each entry with its label."""
        with ArchiveBuilder(io.BytesIO(), label='aar', verbose=True) as builder:
            builder.add_bytes('R.txt', b'')

        assert 'aar: R.txt' in capsys.readouterr().out

    def test_add_tree_with_prefix(self, source_tree):
        """Test adding a tree beneath a prefix."""
        buf = io.BytesIO()
        with ArchiveBuilder(buf) as builder:
            count = builder.add_tree(source_tree, prefix='assets/')

        assert count == 3
        assert 'assets/go/Seq.java' in builder.names


class TestJarWriter:
    """Test suite for JarWriter."""

    def test_manifest_first(self, tmp_path, source_tree):
        """Test that the manifest is the first entry, then the tree."""
        jar = tmp_path / 'out.jar'

        result = JarWriter().write(jar, source_tree)

        assert result == jar
        with zipfile.ZipFile(jar) as zf:
            assert zf.namelist() == [MANIFEST_NAME, 'a.txt', 'go/Seq.java', 'go/hello/Hello.java']
            assert zf.read(MANIFEST_NAME).decode() == MANIFEST_HEADER

    def test_deterministic(self, tmp_path, source_tree):
        """Test that the same input produces identical bytes."""
        first = tmp_path / 'first.jar'
        second = tmp_path / 'second.jar'

        JarWriter().write(first, source_tree)
        JarWriter().write(second, source_tree)

        assert first.read_bytes() == second.read_bytes()

    def test_dry_run(self, tmp_path, source_tree):
        """Test that dry-run writes nothing."""
        jar = tmp_path / 'out.jar'

        assert JarWriter(dry_run=True).write(jar, source_tree) is None
        assert not jar.exists()

    def test_empty_tree(self, tmp_path):
        """Test that an empty tree yields a manifest-only jar."""
        root = tmp_path / 'empty'
        root.mkdir()
        jar = tmp_path / 'out.jar'

        JarWriter().write(jar, root)

        with zipfile.ZipFile(jar) as zf:
            assert zf.namelist() == [MANIFEST_NAME]

    def test_custom_manifest(self, tmp_path, source_tree):
        """Test that the manifest header can be replaced."""
        jar = tmp_path / 'out.jar'

        JarWriter().write(jar, source_tree, manifest_header='Manifest-Version: 1.0\n\n')

        with zipfile.ZipFile(jar) as zf:
            assert zf.read(MANIFEST_NAME) == b'Manifest-Version: 1.0\n\n'

    def test_source_manifest_not_copied(self, tmp_path, source_tree):
        """Test that a manifest inside the tree does not replace the fixed header."""
        (source_tree / 'META-INF').mkdir()
        (source_tree / 'META-INF' / 'MANIFEST.MF').write_text('Manifest-Version: 9.9\n')
        jar = tmp_path / 'out.jar'

        JarWriter().write(jar, source_tree)

        with zipfile.ZipFile(jar) as zf:
            assert zf.namelist().count(MANIFEST_NAME) == 1
            assert zf.read(MANIFEST_NAME).decode() == MANIFEST_HEADER
            assert 'go/Seq.java' in zf.namelist()
