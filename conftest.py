"""测试环境：缓存文件写到临时目录，避免污染 ./data"""

import os
import tempfile

os.environ.setdefault(
    "CACHE_FILE", os.path.join(tempfile.mkdtemp(prefix="gov-data-test-"), "cache.json")
)
