from __future__ import annotations

from unittest import TestCase

from conftest import metadata_document, snapshot_metadata_document

from maven_depends.metadata import MavenMetadata, is_pre_release
from maven_depends.version import VersionNumber


def v(text: str) -> VersionNumber:
    return VersionNumber.parse(text)


class TestMavenMetadata(TestCase):
    def test_versions(self):
        metadata = MavenMetadata.parse(metadata_document("g", "a", ("1.0", "1.1", "1.1", "2.0"), "2.0", "2.0"))
        self.assertEqual([], metadata.errors)
        self.assertEqual([v("1.0"), v("1.1"), v("2.0")], metadata.versions)
        self.assertEqual(v("2.0"), metadata.latest)
        self.assertEqual(v("2.0"), metadata.release)
        self.assertEqual(VersionNumber.UNKNOWN, metadata.snapshot)

    def test_latest_skips_pre_releases(self):
        metadata = MavenMetadata.parse(metadata_document("g", "a", ("1.0", "2.0-rc1", "1.9"), latest="2.0-rc1"))
        self.assertEqual(v("1.9"), metadata.latest)
        self.assertEqual([v("1.0"), v("2.0-rc1"), v("1.9")], metadata.versions)

    def test_latest_skips_snapshots(self):
        metadata = MavenMetadata.parse(metadata_document("g", "a", ("1.0", "1.1", "2.0-SNAPSHOT"), "2.0-SNAPSHOT"))
        self.assertEqual(v("1.1"), metadata.latest)

    def test_latest_kept_when_everything_is_pre_release(self):
        metadata = MavenMetadata.parse(metadata_document("g", "a", ("1.0-alpha", "1.0-beta"), latest="1.0-beta"))
        self.assertEqual(v("1.0-beta"), metadata.latest)

    def test_latest_without_pointer(self):
        metadata = MavenMetadata.parse(metadata_document("g", "a", ("1.2.3", "1.10.0", "1.9.9")))
        self.assertEqual(v("1.10.0"), metadata.latest)
        self.assertEqual(VersionNumber.UNKNOWN, metadata.release)

    def test_empty(self):
        metadata = MavenMetadata.parse(metadata_document("g", "a", ()))
        self.assertEqual([], metadata.errors)
        self.assertEqual([], metadata.versions)
        self.assertEqual(VersionNumber.UNKNOWN, metadata.latest)

    def test_namespaced(self):
        document = (
            '<metadata xmlns="http://maven.apache.org/METADATA/1.1.0"><versioning>'
            "<versions><version>3.0</version></versions></versioning></metadata>"
        )
        metadata = MavenMetadata.parse(document)
        self.assertEqual([v("3.0")], metadata.versions)
        self.assertEqual(v("3.0"), metadata.latest)

    def test_snapshot_version(self):
        metadata = MavenMetadata.parse(
            snapshot_metadata_document("g", "a", "1.0.0-SNAPSHOT", "20230516.120102", "3")
        )
        self.assertEqual([], metadata.errors)
        self.assertEqual("1.0.0-20230516.120102-3", str(metadata.snapshot))

    def test_local_snapshot_version(self):
        metadata = MavenMetadata.parse(snapshot_metadata_document("g", "a", "1.0-SNAPSHOT", None, None))
        self.assertEqual(v("1.0-SNAPSHOT"), metadata.snapshot)

    def test_snapshot_before_version(self):
        metadata = MavenMetadata()
        self.assertFalse(
            metadata.process(
                "<metadata><versioning><snapshot><timestamp>1</timestamp>"
                "<buildNumber>1</buildNumber></snapshot></versioning></metadata>"
            )
        )
        self.assertEqual(1, len(metadata.errors))

    def test_malformed(self):
        metadata = MavenMetadata()
        self.assertFalse(metadata.process("<metadata><versioning></metadata>"))
        self.assertTrue(metadata.errors[0].startswith("malformed XML"))

    def test_to_obj(self):
        metadata = MavenMetadata.parse(metadata_document("g", "a", ("1.0",), "1.0", "1.0"))
        self.assertEqual(
            {"latest": "1.0", "release": "1.0", "snapshot": "", "versions": ["1.0"]},
            metadata.to_obj(),
        )


class TestPreRelease(TestCase):
    def test_pre_releases(self):
        for text in ("1.0-rc1", "1.0-RC2", "1.0-CR1", "1.0-M1", "1.0-milestone-3", "1.0-beta", "1.0-b2", "1.0-alpha-1", "1.0-a"):
            with self.subTest(version=text):
                self.assertTrue(is_pre_release(v(text)))

    def test_releases(self):
        for text in ("1.0", "1.0.Final", "1.0-jre", "1.0-android", "1.0-SNAPSHOT"):
            with self.subTest(version=text):
                self.assertFalse(is_pre_release(v(text)))
