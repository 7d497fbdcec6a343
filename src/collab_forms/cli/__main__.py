from collab_forms.cli import app

app()
