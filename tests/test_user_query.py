import math
import unittest

from tests.fakes import matches
from user_api.errors import InvalidSortFieldError, ValidationError
from user_api.services.user_query import (
    ListOptions,
    assemble_page,
    build_projection,
    build_search_filter,
    build_sort,
    build_user_query,
    calculate_skip,
    calculate_total_pages,
    map_sort_field,
    parse_list_options,
)


class TestParseListOptions(unittest.TestCase):
    def test_defaults_when_nothing_given(self):
        options = parse_list_options()
        self.assertEqual(options, ListOptions())
        self.assertEqual(options.page, 1)
        self.assertEqual(options.page_size, 10)
        self.assertEqual(options.sort_by, "created_at")
        self.assertEqual(options.order, "asc")
        self.assertEqual(options.fields, ())
        self.assertEqual(options.search, "")

    def test_page_falls_back_to_first_page(self):
        for raw in ("0", "-3", "abc", "", "1.5", "1_0", " 3 ", "\uff13"):
            with self.subTest(raw=raw):
                self.assertEqual(parse_list_options(page=raw).page, 1)
        self.assertEqual(parse_list_options(page="7").page, 7)
        self.assertEqual(parse_list_options(page="+2").page, 2)

    def test_page_size_falls_back_to_default(self):
        for raw in ("0", "-1", "101", "ten", "", "2_0", " 5"):
            with self.subTest(raw=raw):
                self.assertEqual(parse_list_options(page_size=raw).page_size, 10)
        self.assertEqual(parse_list_options(page_size="1").page_size, 1)
        self.assertEqual(parse_list_options(page_size="100").page_size, 100)

    def test_fields_are_split_and_trimmed(self):
        options = parse_list_options(fields=" email , profile.first_name,created_at ")
        self.assertEqual(options.fields, ("email", "profile.first_name", "created_at"))
        self.assertEqual(parse_list_options(fields="").fields, ())

    def test_search_is_trimmed(self):
        self.assertEqual(parse_list_options(search="  john ").search, "john")
        self.assertEqual(parse_list_options(search="   ").search, "")

    def test_invalid_sort_field_is_rejected(self):
        with self.assertRaises(InvalidSortFieldError) as ctx:
            parse_list_options(sort="password_hash")
        self.assertIsInstance(ctx.exception, ValidationError)
        self.assertEqual(
            str(ctx.exception),
            "Invalid sort field. Valid options: "
            "email, created_at, updated_at, first_name, last_name",
        )

    def test_sort_field_is_case_sensitive(self):
        with self.assertRaises(InvalidSortFieldError):
            parse_list_options(sort="Email")

    def test_sort_field_is_trimmed_and_defaulted(self):
        self.assertEqual(parse_list_options(sort=" last_name ").sort_by, "last_name")
        self.assertEqual(parse_list_options(sort="  ").sort_by, "created_at")

    def test_order_is_normalized(self):
        self.assertEqual(parse_list_options(order=" DESC ").order, "desc")
        self.assertEqual(parse_list_options(order="sideways").order, "asc")


class TestListOptionsInvariants(unittest.TestCase):
    def test_rejects_out_of_range_values(self):
        with self.assertRaises(ValueError):
            ListOptions(page=0)
        with self.assertRaises(ValueError):
            ListOptions(page_size=101)
        with self.assertRaises(InvalidSortFieldError):
            ListOptions(sort_by="nin")


class TestSearchFilter(unittest.TestCase):
    def setUp(self):
        self.john = {"email": "john@x.com", "profile": {"first_name": "John", "last_name": "Doe"}}
        self.joe = {"email": "joe@x.com", "profile": {"first_name": "Joseph"}}
        self.alice = {"email": "alice@x.com", "profile": {"first_name": "Alice", "last_name": "Smith"}}

    def test_empty_search_matches_everything(self):
        query = build_search_filter("")
        self.assertEqual(query, {})
        for doc in (self.john, self.joe, self.alice):
            self.assertTrue(matches(doc, query))

    def test_or_across_email_and_names(self):
        query = build_search_filter("Jo")
        self.assertEqual(
            query,
            {
                "$or": [
                    {"email": {"$regex": "Jo", "$options": "i"}},
                    {"profile.first_name": {"$regex": "Jo", "$options": "i"}},
                    {"profile.last_name": {"$regex": "Jo", "$options": "i"}},
                ]
            },
        )
        self.assertTrue(matches(self.john, query))
        self.assertTrue(matches(self.joe, query))
        self.assertFalse(matches(self.alice, query))

    def test_pattern_is_passed_through(self):
        query = build_search_filter("a.b")
        self.assertEqual(query["$or"][0]["email"]["$regex"], "a.b")


class TestSortAndProjection(unittest.TestCase):
    def test_name_fields_map_to_profile(self):
        self.assertEqual(map_sort_field("first_name"), "profile.first_name")
        self.assertEqual(map_sort_field("last_name"), "profile.last_name")
        for name in ("email", "created_at", "updated_at"):
            self.assertEqual(map_sort_field(name), name)

    def test_sort_direction(self):
        self.assertEqual(build_sort("first_name", "asc"), [("profile.first_name", 1)])
        self.assertEqual(build_sort("email", "desc"), [("email", -1)])

    def test_no_fields_means_no_projection(self):
        self.assertIsNone(build_projection([]))

    def test_projection_always_keeps_identifier(self):
        self.assertEqual(build_projection(["email"]), {"email": 1, "_id": 1})
        self.assertEqual(
            build_projection(["profile.first_name", "created_at"]),
            {"profile.first_name": 1, "created_at": 1, "_id": 1},
        )

    def test_explicit_identifier_is_left_alone(self):
        self.assertEqual(build_projection(["email", "_id"]), {"email": 1, "_id": 1})
        self.assertEqual(build_projection(["id"]), {"_id": 1})


class TestPagination(unittest.TestCase):
    def test_skip(self):
        self.assertEqual(calculate_skip(1, 10), 0)
        self.assertEqual(calculate_skip(2, 5), 5)
        self.assertEqual(calculate_skip(4, 25), 75)

    def test_total_pages_is_ceiling(self):
        for page_size in (1, 2, 3, 7, 10, 99, 100):
            for total in (0, 1, 5, 12, 99, 100, 101, 1000):
                with self.subTest(page_size=page_size, total=total):
                    self.assertEqual(
                        calculate_total_pages(total, page_size),
                        math.ceil(total / page_size),
                    )

    def test_zero_records_means_zero_pages(self):
        self.assertEqual(calculate_total_pages(0, 10), 0)

    def test_build_user_query(self):
        options = parse_list_options(
            page="2", page_size="5", search="doe", sort="last_name", order="desc", fields="email"
        )
        query = build_user_query(options)
        self.assertEqual(query.skip, 5)
        self.assertEqual(query.limit, 5)
        self.assertEqual(query.sort, [("profile.last_name", -1)])
        self.assertEqual(query.projection, {"email": 1, "_id": 1})
        self.assertIn("$or", query.filter)

    def test_assemble_page(self):
        options = ListOptions(page=2, page_size=5)
        result = assemble_page([], 12, options)
        self.assertEqual(result.total_count, 12)
        self.assertEqual(result.page, 2)
        self.assertEqual(result.page_size, 5)
        self.assertEqual(result.total_pages, 3)
        self.assertEqual(result.users, [])


if __name__ == "__main__":
    unittest.main()
