import json

import yaml

from common.fiscal_engine.catalog import build_catalog, main


def test_catalog_lists_every_check_in_order():
    entries = build_catalog()
    assert [e.order for e in entries] == sorted(e.order for e in entries)
    assert len(entries) == 7
    by_id = {e.check_id: e for e in entries}
    assert by_id["TAX-NCF-VALIDATION"].error_codes == ["ncf_invalid_format", "ncf_expired"]
    assert by_id["TAX-NCF-VALIDATION"].warning_codes == ["ncf_unknown_type"]
    assert by_id["TAX-ITBIS-CONSISTENCY"].class_name == "TAX_ITBIS_CONSISTENCY"


def test_catalog_json_output(capsys):
    main(["--format", "json"])
    catalog = json.loads(capsys.readouterr().out)
    assert catalog[0]["check_id"] == "TAX-ITBIS-CONSISTENCY"


def test_catalog_yaml_output(capsys):
    main([])
    catalog = yaml.safe_load(capsys.readouterr().out)
    assert {entry["check_id"] for entry in catalog} >= {"TAX-FIELD-COHERENCE", "TAX-TELECOM-SURCHARGES"}
