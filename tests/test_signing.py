import base64
import hashlib
import hmac

import pytest

from monitor_script.assembler import BLANK_SCRIPT_TEXT, assemble, blank_script
from monitor_script.encoding import decode, encode
from monitor_script.models import MonitorScript, ScriptLocation
from monitor_script.reconciler import reconcile
from monitor_script.signing import compute_tag, sign_locations, verify_locations

SECRET = b"test-secret"


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "body",
    ["", "GET https://example.com", "  leading and trailing  \n", "héllo ✓ 日本", "line1\r\nline2\ttab"],
)
def test_encoding_round_trips(body):
    assert decode(encode(body)) == body

def test_encode_is_standard_base64():
    assert encode("GET https://example.com") == base64.b64encode(b"GET https://example.com").decode()
    assert encode("GET https://example.com") == encode("GET https://example.com")

@pytest.mark.parametrize("bad", [" ", "not base64!", "YQ", "//79"])
def test_decode_rejects_non_canonical_input(bad):
    with pytest.raises(ValueError):
        decode(bad)

# ---------------------------------------------------------------------------
# Location signing
# ---------------------------------------------------------------------------

def test_tag_is_hmac_sha256_of_encoded_body():
    canonical = encode("GET https://example.com")
    expected = hmac.new(SECRET, canonical.encode(), hashlib.sha256).hexdigest()

    tag = compute_tag(canonical, SECRET)

    assert tag == expected
    assert len(tag) == 64
    assert tag != hmac.new(SECRET, b"GET https://example.com", hashlib.sha256).hexdigest()

def test_tag_changes_with_body():
    assert compute_tag(encode("one"), SECRET) != compute_tag(encode("two"), SECRET)

def test_tag_depends_on_secret():
    canonical = encode("same body")
    assert compute_tag(canonical, b"key-a") != compute_tag(canonical, b"key-b")

def test_tags_are_identical_across_locations():
    canonical = encode("body")
    locations = [ScriptLocation(name=n) for n in ("us-east", "eu-west", "ap-south")]

    signed = sign_locations(canonical, locations, SECRET)

    assert [loc.name for loc in signed] == ["us-east", "eu-west", "ap-south"]
    assert len({loc.hmac for loc in signed}) == 1

def test_sign_empty_locations():
    assert sign_locations(encode("body"), [], SECRET) == []

def test_sign_discards_supplied_tags():
    canonical = encode("body")
    signed = sign_locations(canonical, [ScriptLocation(name="us-east", hmac="stale")], SECRET)
    assert signed[0].hmac == compute_tag(canonical, SECRET)

def test_bound_tags_differ_per_location():
    canonical = encode("body")
    locations = [ScriptLocation(name="us-east"), ScriptLocation(name="eu-west")]

    signed = sign_locations(canonical, locations, SECRET, bind_location_name=True)

    assert signed[0].hmac != signed[1].hmac
    assert signed[0].hmac == compute_tag(canonical, SECRET, "us-east")
    assert signed[0].hmac != compute_tag(canonical, SECRET)

def test_bound_tags_separate_name_from_body():
    assert compute_tag("BBBB", SECRET, "xAAAA") != compute_tag("AAAABBBB", SECRET, "x")
    assert compute_tag("body", SECRET, "us-east") == hmac.new(
        SECRET, b"us-east\nbody", hashlib.sha256
    ).hexdigest()

# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------

def test_verify_accepts_untouched_script():
    script = assemble("body", [ScriptLocation(name="us-east")], SECRET)
    assert verify_locations(script, SECRET) == []

def test_verify_flags_body_swap():
    script = assemble("body", [ScriptLocation(name="us-east")], SECRET)
    tampered = MonitorScript(text=encode("evil"), locations=script.locations)
    assert verify_locations(tampered, SECRET) == ["us-east"]

def test_verify_flags_wrong_secret():
    script = assemble("body", [ScriptLocation(name="us-east")], SECRET)
    assert verify_locations(script, b"other") == ["us-east"]

# ---------------------------------------------------------------------------
# Assembler / reconciler
# ---------------------------------------------------------------------------

def test_assemble_encodes_and_signs():
    script = assemble("GET https://example.com", [ScriptLocation(name="us-east")], SECRET)

    assert script.text == encode("GET https://example.com")
    assert len(script.locations) == 1
    assert script.locations[0].name == "us-east"
    assert script.locations[0].hmac == compute_tag(script.text, SECRET)

def test_assemble_wire_format():
    script = assemble("x", [ScriptLocation(name="us-east")], SECRET)
    payload = script.model_dump(by_alias=True)
    assert set(payload) == {"scriptText", "scriptLocations"}
    assert payload["scriptLocations"][0]["name"] == "us-east"

def test_blank_script():
    script = blank_script()
    assert script.text == BLANK_SCRIPT_TEXT == " "
    assert script.locations == []

def test_assemble_then_reconcile_recovers_declared_fields():
    body = "var assert = require('assert');\n$browser.get('https://example.com');"
    script = assemble(body, [ScriptLocation(name="us-east", hmac="user-supplied")], SECRET)

    fields = reconcile(script)

    assert fields["text"] == body
    assert [loc["name"] for loc in fields["locations"]] == ["us-east"]
    assert fields["locations"][0]["hmac"] == script.locations[0].hmac

def test_reconcile_passes_blank_placeholder_through():
    fields = reconcile(blank_script())
    assert fields == {"text": " ", "locations": []}

def test_reconcile_preserves_location_order():
    remote = MonitorScript(
        text=encode("b"),
        locations=[ScriptLocation(name="z", hmac="1"), ScriptLocation(name="a", hmac="2")],
    )
    assert [loc["name"] for loc in reconcile(remote)["locations"]] == ["z", "a"]

def test_remote_null_locations():
    script = MonitorScript.model_validate({"scriptText": encode("b"), "scriptLocations": None})
    assert script.locations == []
