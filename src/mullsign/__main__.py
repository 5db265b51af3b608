from mullsign.cli import app

app(prog_name="mullsign")
