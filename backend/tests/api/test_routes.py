"""Route tests: end-to-end request flows through the session engine.

Tests cover:
    - Health probes
    - Corpus replacement report
    - Search with camelCase filters, history and analytics
    - Saved search create → load → use count
    - Discovery endpoints (insights, recommendations, related)
    - Selection + bulk export / delete
    - Error envelopes: 400 validation, 404 not found
"""


async def test_health(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["service"] == "quote-discovery-api"


async def test_ready_with_memory_storage(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"] == {"storage": "memory"}


async def test_corpus_report_counts_rejections(client):
    res = await client.put(
        "/api/v1/sessions/s9/corpus",
        json={"quotes": [{"id": "1", "text": "ok"}, {"author": "no text"}]},
    )
    body = res.json()
    assert body["report"]["acceptedQuotes"] == 1
    assert body["report"]["rejectedQuotes"] == 1
    assert body["totalQuotes"] == 1


async def test_search_returns_camel_case_results(client, session):
    res = await client.post(f"{session}/search", json={"query": "bold"})
    body = res.json()
    assert res.status_code == 200
    assert body["total"] == 2
    assert body["recorded"] is True
    assert [q["id"] for q in body["results"]] == ["1", "3"]
    assert "isLiked" in body["results"][0]


async def test_boolean_only_search(client, session):
    res = await client.post(
        f"{session}/search",
        json={
            "query": "",
            "advancedFilters": {"booleanSearch": {"mustExclude": ["humble", "kind"]}},
        },
    )
    assert [q["id"] for q in res.json()["results"]] == ["1"]


async def test_history_and_analytics_follow_searches(client, session):
    await client.post(f"{session}/search", json={"query": "bold"})
    await client.post(
        f"{session}/search", json={"query": "", "filters": {"category": "wisdom"}},
    )

    history = (await client.get(f"{session}/history")).json()
    assert [h["query"] for h in history] == ["Filtered Search", "bold"]

    analytics = (await client.get(f"{session}/analytics")).json()
    assert analytics["totalSearches"] == 2
    assert analytics["averageResults"] == 1.5

    res = await client.delete(f"{session}/history/entry", params={"query": "bold"})
    assert res.status_code == 204
    res = await client.delete(f"{session}/history/entry", params={"query": "bold"})
    assert res.status_code == 404


async def test_field_search_and_suggestions(client, session):
    res = await client.get(
        f"{session}/search/field", params={"q": "a", "field": "author"},
    )
    assert [q["id"] for q in res.json()] == ["1", "3"]
    res = await client.get(f"{session}/suggestions", params={"q": "fav"})
    assert res.json() == ["Faves"]


async def test_saved_search_flow(client, session):
    await client.post(
        f"{session}/search", json={"query": "bold", "filters": {"author": "A"}},
    )
    res = await client.post(f"{session}/saved-searches", json={"name": " Bold A "})
    assert res.status_code == 201
    saved = res.json()
    assert saved["name"] == "Bold A"

    await client.post(f"{session}/search", json={"query": "humble", "filters": {}})
    res = await client.post(f"{session}/saved-searches/{saved['id']}/load")
    assert res.json()["query"] == "bold"
    assert res.json()["total"] == 2
    await client.post(f"{session}/saved-searches/{saved['id']}/load")

    listed = (await client.get(f"{session}/saved-searches")).json()
    assert listed[0]["useCount"] == 2

    res = await client.delete(f"{session}/saved-searches/{saved['id']}")
    assert res.status_code == 204
    assert (await client.get(f"{session}/saved-searches")).json() == []


async def test_save_without_intent_is_400(client, session):
    res = await client.post(f"{session}/saved-searches", json={"name": "Empty"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_blank_name_is_400(client, session):
    res = await client.post(f"{session}/saved-searches", json={"name": "   "})
    assert res.status_code == 400


async def test_discovery_endpoints(client, session):
    await client.post(f"{session}/search", json={"query": "bold"})

    insights = (await client.get(f"{session}/insights")).json()
    assert insights["favoriteAuthor"] == "A"
    assert len(insights["searchTrends"]) == 7

    recs = (await client.get(f"{session}/recommendations")).json()
    assert 0 < len(recs) <= 5

    related = (await client.get(f"{session}/quotes/1/related")).json()
    assert [q["id"] for q in related["sameAuthor"]] == ["3"]

    res = await client.get(f"{session}/quotes/missing/related")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_select_all_then_export(client, session):
    await client.post(f"{session}/search", json={"query": "b"})
    res = await client.post(f"{session}/selection/select-all")
    assert res.json()["count"] == 3

    res = await client.post(f"{session}/bulk", json={"type": "export"})
    outcome = res.json()
    assert outcome["document"]["totalQuotes"] == 3
    assert len(outcome["document"]["quotes"]) == 3
    assert (await client.get(f"{session}/selection")).json()["count"] == 0


async def test_bulk_delete_updates_corpus(client, session):
    await client.post(f"{session}/selection", json={"quoteIds": ["2"]})
    res = await client.post(f"{session}/bulk", json={"type": "delete"})
    assert res.json()["succeeded"] == ["2"]
    res = await client.post(f"{session}/search", json={"query": "humble"})
    assert res.json()["total"] == 0


async def test_bulk_add_requires_target(client, session):
    await client.post(f"{session}/selection", json={"quoteIds": ["2"]})
    res = await client.post(f"{session}/bulk", json={"type": "addToCollection"})
    assert res.status_code == 400
    assert (await client.get(f"{session}/selection")).json()["count"] == 0


async def test_unknown_bulk_type_is_400(client, session):
    res = await client.post(f"{session}/bulk", json={"type": "shred"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_drop_session(client, session):
    assert (await client.delete(session)).status_code == 204
    assert (await client.delete(session)).status_code == 404


async def test_not_found_envelope_names_session_and_resource(client, session):
    res = await client.get(f"{session}/quotes/missing/related")
    error = res.json()["error"]
    assert error["context"]["session_id"] == "s1"
    assert error["resource"] == {"type": "Quote", "id": "missing"}


async def test_bulk_rejection_reports_operation(client, session):
    res = await client.post(
        f"{session}/bulk", json={"type": "removeFromCollection"},
    )
    error = res.json()["error"]
    assert res.status_code == 400
    assert error["code"] == "BULK_OPERATION_INVALID"
    assert error["context"]["operation"] == "removeFromCollection"


async def test_saved_search_rejection_names_field(client, session):
    res = await client.post(f"{session}/saved-searches", json={"name": "Empty"})
    assert res.json()["error"]["field"] == "query"


async def test_body_validation_carries_session_id(client, session):
    res = await client.post(f"{session}/bulk", json={"type": "shred"})
    error = res.json()["error"]
    assert error["context"]["session_id"] == "s1"
    assert error["details"][0]["field"] == "body.type"
