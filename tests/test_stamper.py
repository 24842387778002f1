import codecs
from pathlib import Path

import pytest

from projstamp.errors import FormatError, ParseError, StructuralError
from projstamp.stamper import StampResult, stamp, stamp_all
from projstamp.versioning import Strategy

from samples import BARE_PROJECT, NAMESPACED_PROJECT, NO_TARGET_FRAMEWORK_PROJECT, SDK_PROJECT


@pytest.mark.parametrize(
    "current, strategy, reset_build, expected",
    [
        ("1.0.0.0", Strategy.FULL_REVISION, False, "1.0.1.1"),
        ("2.5.3.9", Strategy.NEW_MINOR, False, "2.6.0.9"),
        ("2.5.3.9", Strategy.NEW_MAJOR, True, "3.0.0.0"),
    ],
)
def test_stamp_end_to_end(write_project, current, strategy, reset_build, expected):
    path = write_project(version=current)
    result = stamp(path, strategy, reset_build)
    assert result == StampResult(path, current, expected)
    assert path.read_text(encoding="utf-8") == SDK_PROJECT.format(version=expected)


def test_stamp_creates_missing_fields(write_project):
    path = write_project(content=BARE_PROJECT)
    result = stamp(path, Strategy.REVISION_ONLY)
    assert (result.old_version, result.new_version) == ("1.0.0.0", "1.0.1.0")
    assert path.read_text(encoding="utf-8") == (
        '<Project Sdk="Microsoft.NET.Sdk">\n'
        "  <PropertyGroup>\n"
        "    <TargetFramework>net8.0</TargetFramework>\n"
        "    <Nullable>enable</Nullable>\n"
        "    <Version>1.0.1.0</Version>\n"
        "    <AssemblyVersion>1.0.1.0</AssemblyVersion>\n"
        "    <FileVersion>1.0.1.0</FileVersion>\n"
        "  </PropertyGroup>\n"
        "</Project>\n"
    )


def test_stamp_only_reads_version_field(write_project):
    path = write_project(
        content=(
            "<Project><PropertyGroup>"
            "<TargetFramework>net8.0</TargetFramework>"
            "<Version>4.0.0.1</Version>"
            "<AssemblyVersion>not a version</AssemblyVersion>"
            "</PropertyGroup></Project>"
        )
    )
    stamp(path, Strategy.FULL_REVISION)
    assert path.read_text(encoding="utf-8") == (
        "<Project><PropertyGroup>"
        "<TargetFramework>net8.0</TargetFramework>"
        "<Version>4.0.1.2</Version>"
        "<AssemblyVersion>4.0.1.2</AssemblyVersion>"
        "<FileVersion>4.0.1.2</FileVersion>"
        "</PropertyGroup></Project>"
    )


def test_stamp_ignores_version_in_other_property_groups(write_project):
    path = write_project(
        content=(
            "<Project>"
            "<PropertyGroup><Version>9.9.9.9</Version></PropertyGroup>"
            "<PropertyGroup><TargetFramework>net8.0</TargetFramework></PropertyGroup>"
            "</Project>"
        )
    )
    result = stamp(path, Strategy.REVISION_ONLY)
    assert result.old_version == "1.0.0.0"
    assert "<PropertyGroup><Version>9.9.9.9</Version></PropertyGroup>" in path.read_text(encoding="utf-8")


def test_stamp_strips_whitespace_around_version(write_project):
    path = write_project(
        content="<Project><PropertyGroup><TargetFramework>net8.0</TargetFramework>"
        "<Version>\n  1.2.3.4\n</Version></PropertyGroup></Project>"
    )
    assert stamp(path, Strategy.REVISION_ONLY).new_version == "1.2.4.4"


def test_stamp_namespaced_project(write_project):
    path = write_project("Legacy.csproj", content=NAMESPACED_PROJECT)
    result = stamp(path, "NewMinor")
    assert result.new_version == "3.2.0.1"
    text = path.read_text(encoding="utf-8")
    assert "<Version>3.2.0.1</Version>" in text
    assert "<AssemblyVersion>3.2.0.1</AssemblyVersion>" in text
    assert "<FileVersion>3.2.0.1</FileVersion>" in text
    assert "ns0:" not in text


def test_structural_error_leaves_file_untouched(write_project):
    path = write_project(content=NO_TARGET_FRAMEWORK_PROJECT)
    before = path.read_bytes()
    with pytest.raises(StructuralError) as excinfo:
        stamp(path, Strategy.FULL_REVISION)
    assert excinfo.value.path == path
    assert path.read_bytes() == before


def test_format_error_leaves_file_untouched(write_project):
    path = write_project(version="1.0.0")
    before = path.read_bytes()
    with pytest.raises(FormatError) as excinfo:
        stamp(path, Strategy.FULL_REVISION)
    assert excinfo.value.path == path
    assert excinfo.value.version == "1.0.0"
    assert path.read_bytes() == before


def test_parse_error(write_project):
    path = write_project(content="<Project><PropertyGroup></Project>")
    with pytest.raises(ParseError):
        stamp(path, Strategy.FULL_REVISION)


def test_dry_run_writes_nothing(write_project):
    path = write_project(version="1.0.0.0")
    before = path.read_bytes()
    result = stamp(path, Strategy.FULL_REVISION, dry_run=True)
    assert result.new_version == "1.0.1.1"
    assert path.read_bytes() == before


def test_backup_keeps_original_content(write_project):
    path = write_project(version="1.0.0.0")
    before = path.read_bytes()
    stamp(path, Strategy.FULL_REVISION, backup=True)
    backups = list(path.parent.glob("App.csproj.bak.*"))
    assert len(backups) == 1
    assert backups[0].read_bytes() == before


def test_stamp_all_stops_at_first_failure(write_project):
    first = write_project("a/A.csproj", version="1.0.0.0")
    broken = write_project("b/B.csproj", content=NO_TARGET_FRAMEWORK_PROJECT)
    last = write_project("c/C.csproj", version="1.0.0.0")
    results = stamp_all([first, broken, last], Strategy.REVISION_ONLY)

    assert next(results).new_version == "1.0.1.0"
    with pytest.raises(StructuralError):
        next(results)
    assert last.read_text(encoding="utf-8") == SDK_PROJECT.format(version="1.0.0.0")


def test_result_record():
    result = StampResult(Path("x/App.csproj"), "1.0.0.0", "1.0.1.1")
    assert result.to_record() == {
        "filepath": "x/App.csproj",
        "newVersion": "1.0.1.1",
        "oldVersion": "1.0.0.0",
    }
    assert str(result) == "x/App.csproj: 1.0.0.0 --> 1.0.1.1"


def test_stamp_utf16_project(write_project):
    path = write_project("Wide.csproj", content="")
    text = '<?xml version="1.0" encoding="utf-16"?>\n' + BARE_PROJECT
    path.write_bytes(codecs.BOM_UTF16_LE + text.encode("utf-16-le"))

    result = stamp(path, Strategy.REVISION_ONLY)

    assert result.new_version == "1.0.1.0"
    raw = path.read_bytes()
    assert raw.startswith(codecs.BOM_UTF16_LE)
    written = raw[len(codecs.BOM_UTF16_LE):].decode("utf-16-le")
    assert written.startswith('<?xml version="1.0" encoding="utf-16"?>\n<Project')
    assert "<FileVersion>1.0.1.0</FileVersion>" in written


def test_stamp_keeps_comment_after_root(write_project):
    path = write_project(content=SDK_PROJECT.format(version="1.0.0.0") + "<!-- keep me -->\n")
    stamp(path, Strategy.REVISION_ONLY)
    assert path.read_text(encoding="utf-8") == SDK_PROJECT.format(version="1.0.1.0") + "<!-- keep me -->\n"
