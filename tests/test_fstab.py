from spacewatch.mount import FstabEntry, LinuxMountSource, parse_fstab, read_fstab
from spacewatch.utils.string import unescape_octal

FSTAB = """\
# /etc/fstab: static file system information.
#
# <file system>  <mount point>  <type>  <options>  <dump>  <pass>
UUID=6f2c-11aa   /              ext4    errors=remount-ro 0 1
UUID=7a1b-22bb   /home          ext4    defaults   0 2
/swapfile        none           swap    sw         0 0
/dev/sdb1        /media/My\\040Disk vfat  noauto,user 0 0
tmpfs            /tmp           tmpfs   defaults
broken-line
"""


class TestParseFstab:
    def test_entries(self):
        entries = list(parse_fstab(FSTAB.splitlines()))

        assert [e.path for e in entries] == ['/', '/home', '/media/My Disk', '/tmp']
        assert entries[0] == FstabEntry(
            device='UUID=6f2c-11aa',
            path='/',
            fs_type='ext4',
            options='errors=remount-ro',
        )

    def test_missing_options_default(self):
        (entry,) = parse_fstab(['tmpfs /tmp tmpfs'])
        assert entry.options == 'defaults'

    def test_read_fstab(self, tmp_path):
        path = tmp_path / 'fstab'
        path.write_text(FSTAB)

        assert len(read_fstab(str(path))) == 4


class TestUnescapeOctal:
    def test_space_and_tab(self):
        assert unescape_octal('/mnt/a\\040b\\011c') == '/mnt/a b\tc'

    def test_backslash(self):
        assert unescape_octal('/mnt/a\\134b') == '/mnt/a\\b'

    def test_plain_path_is_unchanged(self):
        assert unescape_octal('/srv/data') == '/srv/data'


class TestLinuxMountSource:
    def test_static_mount_points_from_fstab(self, tmp_path):
        path = tmp_path / 'fstab'
        path.write_text(FSTAB)
        source = LinuxMountSource(fstab_path=str(path))

        assert source.list_static_mount_points() == [
            '/',
            '/home',
            '/media/My Disk',
            '/tmp',
        ]

    def test_missing_fstab_gives_no_mount_points(self, tmp_path):
        source = LinuxMountSource(fstab_path=str(tmp_path / 'missing'))

        assert source.list_static_mount_points() == []
        assert source.list_static_mount_points() == []

    def test_live_mounts_from_the_mount_table(self, monkeypatch):
        from collections import namedtuple

        Partition = namedtuple('Partition', 'device mountpoint fstype opts')
        partitions = [
            Partition('/dev/sda1', '/', 'ext4', 'rw,relatime'),
            Partition('/dev/sda2', '/home', 'ext4', 'rw'),
            Partition('/dev/sdb1', '/home', 'btrfs', 'ro,noatime'),
        ]
        monkeypatch.setattr(
            'spacewatch.mount.linux.psutil.disk_partitions', lambda all: partitions
        )
        source = LinuxMountSource()

        assert source.list_live_mount_paths() == {'/', '/home'}
        assert source.resolve_live_mount('/').read_only is False
        home = source.resolve_live_mount('/home')
        assert home.device == '/dev/sdb1'
        assert home.fs_type == 'btrfs'
        assert home.read_only is True
        assert source.resolve_live_mount('/media/usb') is None
