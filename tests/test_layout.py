from menu_reports.layout import options_from_toggles, prepared_artifact, store_artifact


def test_pdf_keeps_chart_toggle():
    options = options_from_toggles({"include_charts": True, "include_raw_data": False}, "Last 7 days", "pdf")
    assert options.include_charts
    assert not options.include_raw_data
    assert options.date_range_label == "Last 7 days"


def test_data_formats_force_charts_off():
    options = options_from_toggles({"include_charts": True}, "Last 7 days", "json")
    assert not options.include_charts
    assert options.include_device_stats


def test_missing_toggles_default_on_and_blank_range_falls_back():
    options = options_from_toggles({}, "", "pdf")
    assert options.include_traffic_patterns
    assert options.date_range_label == "Last 30 days"


def test_artifact_is_offered_only_for_the_inputs_that_built_it():
    state = {}
    pdf_key = ("pdf", "Test Cafe", options_from_toggles({}, "Last 30 days", "pdf"))
    store_artifact(state, pdf_key, "report.pdf")
    assert prepared_artifact(state, pdf_key) == "report.pdf"

    same_inputs = ("pdf", "Test Cafe", options_from_toggles({}, "Last 30 days", "pdf"))
    assert prepared_artifact(state, same_inputs) == "report.pdf"

    csv_key = ("csv", "Test Cafe", options_from_toggles({}, "Last 30 days", "csv"))
    assert prepared_artifact(state, csv_key) is None
    assert state == {}
    assert prepared_artifact(state, pdf_key) is None


def test_changed_toggle_drops_the_artifact():
    state = {}
    key = ("json", "Test Cafe", options_from_toggles({}, "Last 30 days", "json"))
    store_artifact(state, key, "analytics.json")
    toggled = ("json", "Test Cafe", options_from_toggles({"include_raw_data": False}, "Last 30 days", "json"))
    assert prepared_artifact(state, toggled) is None
