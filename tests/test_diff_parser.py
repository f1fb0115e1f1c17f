import pytest

from diff_parser import parse_diff

SAMPLE_DIFF = """diff --git a/app.py b/app.py
index 83db48f..bf269f4 100644
--- a/app.py
+++ b/app.py
@@ -1,2 +1,3 @@
 import os
-x = 1
+x = 2
+password = "hunter2"
diff --git a/new.py b/new.py
new file mode 100644
index 0000000..3b18e51
--- /dev/null
+++ b/new.py
@@ -0,0 +1 @@
+print("hi")
diff --git a/old.txt b/old.txt
deleted file mode 100644
index 0123456..0000000
--- a/old.txt
+++ /dev/null
@@ -1 +0,0 @@
-bye
diff --git a/src/a.js b/src/b.js
similarity index 90%
rename from src/a.js
rename to src/b.js
index 1111111..2222222 100644
--- a/src/a.js
+++ b/src/b.js
@@ -1 +1 @@
-var a = 1;
+let a = 1;
"""


def test_empty_diff():
    assert parse_diff("") == []
    assert parse_diff("  \n") == []


def test_files_and_statuses():
    files = parse_diff(SAMPLE_DIFF)

    assert [(f.filename, f.status) for f in files] == [
        ("app.py", "modified"),
        ("new.py", "added"),
        ("old.txt", "deleted"),
        ("src/b.js", "renamed"),
    ]


def test_counts_and_patch_text():
    app = parse_diff(SAMPLE_DIFF)[0]

    assert app.additions == 2
    assert app.deletions == 1
    assert app.patch.startswith("@@ -1,2 +1,3 @@")
    assert app.patch.endswith('+password = "hunter2"')
    assert app.previous_filename is None


def test_rename_keeps_previous_name():
    renamed = parse_diff(SAMPLE_DIFF)[-1]

    assert renamed.previous_filename == "src/a.js"


def test_malformed_hunk_raises_value_error():
    broken = "--- a/x.py\n+++ b/x.py\n@@ -1,5 +1,5 @@\n-only one line\n"

    with pytest.raises(ValueError, match="Failed to parse diff"):
        parse_diff(broken)
