from .cli import app

app(prog_name="testcase-ingest")
