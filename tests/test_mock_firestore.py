from firebase_admin import firestore

from participium.config.mock_firestore import MockFirestore


def test_query_operators():
    db = MockFirestore()
    users = db.collection("users")
    users.document("a").set({"role": ["WASTE_MANAGEMENT"], "age": 30})
    users.document("b").set({"role": ["ROAD_MAINTENANCE", "INFRASTRUCTURES"], "age": 40})

    def ids(query):
        return sorted(doc.id for doc in query.stream())

    assert ids(users.where("role", "array_contains_any", ["INFRASTRUCTURES", "X"])) == ["b"]
    assert ids(users.where("role", "array_contains", "WASTE_MANAGEMENT")) == ["a"]
    assert ids(users.where("age", ">=", 35)) == ["b"]
    assert ids(users.where("age", "in", [30, 40])) == ["a", "b"]
    assert len(list(users.where("age", ">", 0).limit(1).stream())) == 1


def test_server_timestamp_and_update():
    db = MockFirestore()
    ref = db.collection("reports").document()
    ref.set({"status": "PENDING_APPROVAL", "created_at": firestore.SERVER_TIMESTAMP})
    snapshot = ref.get()
    assert snapshot.exists
    assert snapshot.to_dict()["created_at"] is not None

    ref.update({"status": "ASSIGNED"})
    assert ref.get().get("status") == "ASSIGNED"

    ref.delete()
    assert not ref.get().exists
