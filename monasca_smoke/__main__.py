from monasca_smoke.main import run

run()
