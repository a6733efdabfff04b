import os
import tempfile

# api.config creates its data directory on import
os.environ.setdefault("QUIZ_DATA_DIR", tempfile.mkdtemp(prefix="quiz_test_data_"))
