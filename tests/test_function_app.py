import function_app


def test_document_built_from_modules():
    document = function_app.api_document

    assert document.modules == ("collections", "features")
    assert document.landing_page.title == function_app.get_app_config().api_title
    assert "http://www.opengis.net/spec/ogcapi-common-2/1.0/req/collections" in document.conformance.conformsTo


def test_routes_registered():
    functions = function_app.app.get_functions()
    assert len(functions) == 6
    assert len({f.get_function_name() for f in functions}) == 6


def test_trigger_tables():
    routes = [t['route'] for t in
              function_app.common_triggers + function_app.collection_triggers + function_app.item_triggers]
    assert routes == [
        'features',
        'features/conformance',
        'features/collections',
        'features/collections/{collection_id}',
        'features/collections/{collection_id}/items',
        'features/collections/{collection_id}/items/{feature_id}',
    ]
