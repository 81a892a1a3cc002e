from school_cms.cli import app

app()
