import json
import pygame
import pytest
from game.answers import TypedKey
from input.keymap import (KeyboardMapper, OctaveCycled, HelpToggled, DEFAULT_KEYMAP,
                          NATURALS, SHARPS, HELP_KEY, deserialize_keymap, load_keymap)

@pytest.fixture
def mapper():
    return KeyboardMapper()

def test_default_rows_cover_every_letter():
    assert sorted(DEFAULT_KEYMAP.values()) == sorted(NATURALS + SHARPS)

def test_naturals_and_sharps(mapper):
    assert mapper.key_down(pygame.K_a, 3) == TypedKey("C", 3)
    assert mapper.key_down(pygame.K_j, 4) == TypedKey("B", 4)
    assert mapper.key_down(pygame.K_w, 5) == TypedKey("C#", 5)
    assert mapper.key_down(pygame.K_y, 3) == TypedKey("A#", 3)

def test_held_key_counts_once(mapper):
    assert mapper.key_down(pygame.K_d, 3) == TypedKey("E", 3)
    assert mapper.key_down(pygame.K_d, 3) is None
    assert mapper.key_down(pygame.K_d, 3) is None
    mapper.key_up(pygame.K_d)
    assert mapper.key_down(pygame.K_d, 3) == TypedKey("E", 3)

def test_shift_cycles_on_release_only(mapper):
    assert mapper.key_down(pygame.K_LSHIFT, 3) is None
    assert mapper.key_up(pygame.K_LSHIFT) == OctaveCycled()
    assert mapper.key_down(pygame.K_RSHIFT, 3) is None
    assert mapper.key_up(pygame.K_RSHIFT) == OctaveCycled()
    assert mapper.key_up(pygame.K_a) is None

def test_help_key(mapper):
    assert mapper.key_down(HELP_KEY, 3) == HelpToggled()
    assert mapper.key_down(HELP_KEY, 3) is None

def test_unmapped_key_ignored(mapper):
    assert mapper.key_down(pygame.K_z, 3) is None
    assert mapper.key_down(pygame.K_k, 3) is None

def test_reset_rearms_held_keys(mapper):
    mapper.key_down(pygame.K_a, 3)
    mapper.reset()
    assert mapper.key_down(pygame.K_a, 3) == TypedKey("C", 3)

def test_custom_keymap():
    m = KeyboardMapper({pygame.K_z: "G#"})
    assert m.key_down(pygame.K_z, 4) == TypedKey("G#", 4)
    assert m.key_down(pygame.K_a, 4) is None

def test_deserialize_keymap_accepts_keycodes():
    assert deserialize_keymap({str(pygame.K_q): "c#"}) == {pygame.K_q: "C#"}

def test_deserialize_keymap_rejects_bad_entries():
    with pytest.raises(ValueError):
        deserialize_keymap({str(pygame.K_q): "H"})
    with pytest.raises(ValueError):
        deserialize_keymap({str(HELP_KEY): "C"})

def test_load_keymap(tmp_path):
    path = tmp_path / "keys.json"
    path.write_text(json.dumps({str(pygame.K_q): "D"}), encoding="utf-8")
    assert load_keymap(str(path)) == {pygame.K_q: "D"}

def test_load_keymap_requires_object(tmp_path):
    path = tmp_path / "keys.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_keymap(str(path))
