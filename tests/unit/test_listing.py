"""Unit tests for LIST output parsing."""

from webftp.ftp.listing import DirectoryEntry, EntryKind, join_remote, parse_list_line


class TestParseListLine:
    """Tests for parse_list_line."""

    def test_directory_line(self):
        """Test a typical directory line."""
        entry = parse_list_line(
            "drwxr-xr-x   2 owner    group        4096 Oct 19 05:12 backups", "pub"
        )

        assert entry is not None
        assert entry.name == "backups"
        assert entry.kind == EntryKind.DIRECTORY
        assert entry.is_dir is True
        assert entry.size == 4096
        assert entry.permissions == "drwxr-xr-x"
        assert entry.owner == "owner"
        assert entry.group == "group"
        assert entry.path == "pub/backups"

    def test_modified_time_is_literal(self):
        """Test modified time is day, month and time exactly as given."""
        entry = parse_list_line("-rw-r--r--   1 ftp ftp 1024 Jan  1  2023 old.log", "")
        assert entry.modified_time == "1 Jan 2023"

    def test_file_name_with_spaces(self):
        """Test names keep their inner spaces."""
        entry = parse_list_line("-rw-r--r--   1 ftp ftp 2048 Mar  3 10:00 my report.pdf", "docs")

        assert entry.name == "my report.pdf"
        assert entry.kind == EntryKind.FILE
        assert entry.size == 2048
        assert entry.path == "docs/my report.pdf"

    def test_symlink(self):
        """Test link target is dropped from the name."""
        entry = parse_list_line("lrwxrwxrwx   1 root root 7 Mar  3 10:00 latest -> v2", "/")

        assert entry.kind == EntryKind.LINK
        assert entry.name == "latest"
        assert entry.path == "/latest"

    def test_missing_group_column(self):
        """Test servers that omit the group column."""
        entry = parse_list_line("-rw-r--r-- 1 ftp 10 Feb  2 09:00 a.txt", "")

        assert entry.owner == "ftp"
        assert entry.group is None
        assert entry.size == 10

    def test_owner_named_like_a_month(self):
        """Test an owner column that looks like a month is not taken as the date."""
        entry = parse_list_line("-rw-r--r--   1 may staff 10 Jun  5 12:00 a.txt", "")

        assert entry.owner == "may"
        assert entry.month == "Jun"
        assert entry.size == 10

    def test_group_named_like_a_month(self):
        """Test a group column that looks like a month, followed by a size."""
        entry = parse_list_line("-rw-r--r--   1 ftp jan 12 Oct 19 05:12 a.txt", "")

        assert entry.group == "jan"
        assert entry.size == 12
        assert entry.month == "Oct"
        assert entry.day == "19"
        assert entry.time == "05:12"
        assert entry.name == "a.txt"

    def test_total_line_skipped(self):
        """Test the "total" header is ignored."""
        assert parse_list_line("total 24", "") is None

    def test_dot_entries_skipped(self):
        """Test . and .. are ignored."""
        assert parse_list_line("drwxr-xr-x 2 ftp ftp 4096 Oct 19 05:12 .", "") is None
        assert parse_list_line("drwxr-xr-x 2 ftp ftp 4096 Oct 19 05:12 ..", "") is None

    def test_non_unix_lines_skipped(self):
        """Test DOS-style and garbage lines are ignored."""
        assert parse_list_line("01-01-23  12:00PM       <DIR>          foo", "") is None
        assert parse_list_line("hello world", "") is None
        assert parse_list_line("", "") is None

    def test_to_dict(self):
        """Test the caller-facing dictionary shape."""
        entry = parse_list_line("drwxr-xr-x 2 ftp staff 4096 Oct 19 05:12 pub", "")
        data = entry.to_dict()

        assert data == {
            "name": "pub",
            "type": "dir",
            "size": 4096,
            "modifiedTime": "19 Oct 05:12",
            "permissions": "drwxr-xr-x",
            "path": "pub",
            "owner": "ftp",
            "group": "staff",
        }


class TestJoinRemote:
    """Tests for join_remote."""

    def test_login_directory(self):
        """Test an empty directory gives the bare name and a slash gives an absolute path."""
        assert join_remote("", "a") == "a"
        assert join_remote("/", "a") == "/a"

    def test_keeps_directory_form(self):
        """Test relative directories stay relative and absolute ones absolute."""
        assert join_remote("pub/", "a") == "pub/a"
        assert join_remote("pub/docs", "a") == "pub/docs/a"
        assert join_remote("/pub/docs", "a") == "/pub/docs/a"


class TestDirectoryEntry:
    """Tests for DirectoryEntry."""

    def test_is_dir_false_for_files_and_links(self):
        """Test only directories report is_dir."""
        for kind in (EntryKind.FILE, EntryKind.LINK):
            entry = DirectoryEntry("x", kind, 0, "1", "Jan", "00:00", "-rw-r--r--", "/x")
            assert entry.is_dir is False
