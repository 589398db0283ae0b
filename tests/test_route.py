"""Tests for wren.routing.route — URI parsing and format suffixes."""

from wren.routing.route import RouteDescriptor, is_api_path, parse_route, split_format


class TestSplitFormat:
    def test_strips_suffix_and_upper_cases(self) -> None:
        assert split_format("api/app/widgets/list.json") == ("api/app/widgets/list", "JSON")

    def test_no_suffix(self) -> None:
        assert split_format("api/app/widgets/list") == ("api/app/widgets/list", None)

    def test_empty_suffix_is_no_format(self) -> None:
        assert split_format("api/app/widgets/list.") == ("api/app/widgets/list", None)

    def test_dot_inside_path_is_not_a_format(self) -> None:
        assert split_format("api/v1.2/widgets") == ("api/v1.2/widgets", None)

    def test_mixed_case_suffix(self) -> None:
        assert split_format("api/app/widgets.Txt") == ("api/app/widgets", "TXT")


class TestParseRoute:
    def test_full_route(self) -> None:
        route = parse_route("GET", "/api/app/widgets/list.json")
        assert route == RouteDescriptor("GET", "app", "widgets", "list", "JSON")

    def test_controller_defaults_to_module(self) -> None:
        route = parse_route("GET", "/api/shop")
        assert route.module == "shop"
        assert route.controller == "shop"
        assert route.method == "index"
        assert route.requested_format is None

    def test_trailing_slash(self) -> None:
        route = parse_route("GET", "/api/shop/basket/")
        assert route.controller == "basket"
        assert route.method == "index"

    def test_empty_segment_falls_back_to_default(self) -> None:
        route = parse_route("GET", "/api/shop//show")
        assert route.controller == "shop"
        assert route.method == "show"

    def test_extra_segments_become_params(self) -> None:
        route = parse_route("PUT", "/api/app/widgets/42/colour/red")
        assert route.method == "42"
        assert route.params == ("colour", "red")

    def test_method_is_upper_cased(self) -> None:
        assert parse_route("delete", "/api/app/widgets").http_method == "DELETE"

    def test_segments_keep_their_case(self) -> None:
        route = parse_route("GET", "/api/Shop/OrderHistory/showAll")
        assert (route.module, route.controller, route.method) == ("Shop", "OrderHistory", "showAll")

    def test_leading_slash_optional(self) -> None:
        assert parse_route("GET", "api/app/widgets").controller == "widgets"

    def test_bare_prefix(self) -> None:
        route = parse_route("GET", "/api")
        assert route.module == ""
        assert route.route_string == "//index"

    def test_custom_prefix(self) -> None:
        route = parse_route("GET", "/v2/api/shop/basket", prefix="v2/api")
        assert (route.module, route.controller) == ("shop", "basket")


class TestRouteDescriptor:
    def test_route_string_is_lower_cased(self) -> None:
        route = parse_route("GET", "/api/Shop/Basket/Show")
        assert route.route_string == "shop/basket/show"

    def test_log_tag(self) -> None:
        route = parse_route("GET", "/api/shop/basket/show")
        assert route.log_tag == "[shop->show]"


class TestIsApiPath:
    def test_matches_prefix(self) -> None:
        assert is_api_path("/api/app/widgets")
        assert is_api_path("/api")
        assert is_api_path("/api/")

    def test_rejects_other_paths(self) -> None:
        assert not is_api_path("/apis/app")
        assert not is_api_path("/favicon.ico")
        assert not is_api_path("/static/api/app")

    def test_custom_prefix(self) -> None:
        assert is_api_path("/rest/shop", "rest")
        assert not is_api_path("/api/shop", "rest")
