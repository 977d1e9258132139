from sqlprobe.cli import app

app(prog_name="sqlprobe")
