"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of covdelta modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("covdelta"):
        del sys.modules[module_name]


GCOVR_SAMPLE = """\
{
  "gcovr/format_version": "0.6",
  "files": [
    {
      "file": "src/init.cpp",
      "lines": [
        {"line_number": 10, "count": 0, "branches": [], "gcovr/noncode": false},
        {"line_number": 11, "count": 3, "branches": [], "gcovr/noncode": false},
        {"line_number": 13, "count": 0, "branches": [], "gcovr/noncode": true}
      ],
      "functions": []
    },
    {
      "file": "src/test/util_tests.cpp",
      "lines": [{"line_number": 1, "count": 7}]
    }
  ]
}
"""

PULL_DIFF_SAMPLE = """\
diff --git a/src/init.cpp b/src/init.cpp
index 1111111..2222222 100644
--- a/src/init.cpp
+++ b/src/init.cpp
@@ -10,2 +10,3 @@ bool AppInit()
 int a = 0;
 int b = 1;
+int c = 2;
"""


@pytest.fixture
def gcovr_sample() -> str:
    return GCOVR_SAMPLE


@pytest.fixture
def pull_diff_sample() -> str:
    return PULL_DIFF_SAMPLE
