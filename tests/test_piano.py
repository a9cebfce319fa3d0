from ui.piano import PianoLayout, BLACK_W

def make():
    return PianoLayout(0, 100, 1800, 200)   # 18 white keys, 100 wide

def by_id(p, key_id):
    return {k.key_id: k for k in p.white_keys + p.black_keys}.get(key_id)

def test_key_counts():
    p = make()
    assert len(p.white_keys) == 18
    assert len(p.black_keys) == 12
    assert p.white_keys[0].key_id == "C3"
    assert p.white_keys[-1].key_id == "F5"
    assert [k.key_id for k in p.black_keys[-2:]] == ["C#5", "D#5"]
    assert by_id(p, "G5") is None

def test_black_keys_straddle_boundaries():
    p = make()
    cs3 = by_id(p, "C#3")
    x, y, w, h = cs3.rect
    assert (x, w) == (100 - BLACK_W / 2, BLACK_W)
    assert h == 120
    fs4 = by_id(p, "F#4")
    assert fs4.rect[0] == 700 + 400 - BLACK_W / 2

def test_hit_test_prefers_black_keys():
    p = make()
    assert p.key_at(100, 150).key_id == "C#3"
    assert p.key_at(100, 250).key_id == "D3"    # below the black key
    assert p.key_at(50, 150).key_id == "C3"
    assert p.key_at(1799, 299).key_id == "F5"
    assert p.key_at(50, 50) is None
    assert p.key_at(1850, 150) is None

def test_clicked_key_carries_letter_and_octave():
    k = make().key_at(1100, 150)
    assert (k.key_id, k.letter, k.octave, k.black) == ("F#4", "F#", 4, True)
