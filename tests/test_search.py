"""Tests for text search over org chart nodes."""

from orgchart_tree import (
    DEFAULT_FIELD_MAPPING,
    FieldMapping,
    build_tree,
)
from orgchart_tree.search import SEARCH_FIELDS, normalize_text, search

fm = DEFAULT_FIELD_MAPPING


def create_tree():
    """Small ministry with accented names and directions."""
    records = [
        {
            "id": 1,
            "parent_id": None,
            "nom": "Curie",
            "prenom": "Marie",
            "fonction": "Présidente",
            "direction": "Direction générale",
        },
        {
            "id": 2,
            "parent_id": 1,
            "nom": "Martin",
            "prenom": "Léa",
            "fonction": "Assistante de direction",
            "role_type": "assistant",
        },
        {
            "id": 3,
            "parent_id": 1,
            "nom": "Durand",
            "prenom": "Paul",
            "fonction": "Directeur",
            "direction": "École nationale",
            "ordre": 2,
        },
        {
            "id": 4,
            "parent_id": 1,
            "nom": "Petit",
            "prenom": "Hélène",
            "fonction": "Directrice financière",
            "direction": "Direction financière",
            "ordre": 1,
        },
        {
            "id": 5,
            "parent_id": 3,
            "nom": "Ecoliere",
            "prenom": "Chloé",
            "fonction": "Développeuse",
            "direction": 42,
        },
    ]
    return build_tree(records, fm)


def ids(results):
    return [r.node.id for r in results]


class TestNormalizeText:
    """Tests for query/value normalization."""

    def test_strips_accents(self):
        """Combining diacritics are removed."""
        assert normalize_text("École Supérieure") == "ecole superieure"
        assert normalize_text("Hélène") == "helene"
        assert normalize_text("Ça") == "ca"

    def test_folds_case(self):
        """Text is lower-cased."""
        assert normalize_text("DIRECTION") == "direction"

    def test_keeps_plain_text(self):
        """Unaccented text is unchanged apart from case."""
        assert normalize_text("abc 123") == "abc 123"


class TestSearch:
    """Tests for search()."""

    def test_accent_insensitive(self):
        """'ecole' matches 'École'."""
        results = search(create_tree(), "ecole", fm)
        assert 3 in ids(results)
        hit = next(r for r in results if r.node.id == 3)
        assert hit.match_field == "direction"
        assert hit.match_value == "École nationale"

    def test_accented_query(self):
        """Accented queries match unaccented values and vice versa."""
        assert ids(search(create_tree(), "hélène", fm)) == [4]
        assert ids(search(create_tree(), "HELENE", fm)) == [4]

    def test_first_field_wins(self):
        """A node matching on several roles reports the first in priority order."""
        results = search(create_tree(), "ecol", fm)
        by_id = {r.node.id: r for r in results}
        # node 5 matches on name before anything else
        assert by_id[5].match_field == "name"
        assert by_id[5].match_value == "Ecoliere"

    def test_one_result_per_node(self):
        """Nodes matching several roles appear once."""
        results = search(create_tree(), "direct", fm)
        assert len(ids(results)) == len(set(ids(results)))

    def test_results_follow_flatten_order(self):
        """Results follow tree pre-order, not input order or relevance."""
        results = search(create_tree(), "direct", fm)
        # root, its assistant, then children sorted by ordre (4 before 3)
        assert ids(results) == [1, 2, 4, 3]

    def test_firstname_match(self):
        """A match on firstname names that role."""
        results = search(create_tree(), "paul", fm)
        assert ids(results) == [3]
        assert results[0].match_field == "firstname"

    def test_empty_query(self):
        """Empty and whitespace queries return nothing."""
        tree = create_tree()
        assert search(tree, "", fm) == []
        assert search(tree, "   ", fm) == []

    def test_no_match(self):
        """No match is an empty list, not an error."""
        assert search(create_tree(), "zzz", fm) == []

    def test_non_string_values_ignored(self):
        """Numeric cells are not searched."""
        assert search(create_tree(), "42", fm) == []

    def test_unbound_roles_skipped(self):
        """Only bound roles are searched."""
        mapping = FieldMapping(name="nom", role_type="role_type")
        tree = build_tree(
            [
                {"id": 1, "parent_id": None, "nom": "Curie", "direction": "Recherche"},
            ],
            mapping,
        )
        assert search(tree, "recherche", mapping) == []
        assert ids(search(tree, "curie", mapping)) == [1]

    def test_search_fields_priority(self):
        """Search roles are fixed and ordered."""
        assert SEARCH_FIELDS == ("name", "firstname", "role", "direction")
