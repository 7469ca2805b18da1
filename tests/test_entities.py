import unittest
import uuid

from user_api.domain.entities import Profile, User, generate_id, validate_email
from user_api.errors import ValidationError


class TestUserEntity(unittest.TestCase):
    def test_new_normalizes_email_and_sets_timestamps(self):
        user = User.new("A@Example.com ", "hash", Profile(first_name="Ann"))
        self.assertEqual(user.email, "a@example.com")
        self.assertEqual(user.created_at, user.updated_at)
        self.assertIsNotNone(user.created_at.tzinfo)
        self.assertEqual(user.profile.first_name, "Ann")

    def test_new_rejects_email_without_at(self):
        with self.assertRaises(ValidationError):
            User.new("not-an-email", "hash", Profile())
        with self.assertRaises(ValidationError):
            validate_email("   ")

    def test_generated_ids_are_time_ordered_uuid7(self):
        first = generate_id()
        second = generate_id()
        self.assertEqual(uuid.UUID(first).version, 7)
        self.assertNotEqual(first, second)
        # Millisecond timestamp prefix never goes backwards
        self.assertLessEqual(first[:13], second[:13])

    def test_to_mongo_uses_id_alias_and_drops_empty_fields(self):
        user = User.new("bob@example.com", "hash", Profile(last_name="Builder"))
        doc = user.to_mongo()
        self.assertEqual(doc["_id"], user.id)
        self.assertNotIn("id", doc)
        self.assertEqual(doc["profile"], {"last_name": "Builder"})
        self.assertEqual(doc["password_hash"], "hash")

    def test_projected_document_only_sets_present_fields(self):
        user = User.model_validate({"_id": "u1", "email": "a@x.com"})
        self.assertEqual(user.model_fields_set, {"id", "email"})

    def test_mark_updated_moves_timestamp_forward(self):
        user = User.new("c@example.com", "hash", Profile())
        before = user.updated_at
        user.mark_updated()
        self.assertGreaterEqual(user.updated_at, before)
        self.assertEqual(user.created_at, before)


if __name__ == "__main__":
    unittest.main()
