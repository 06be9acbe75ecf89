from pinhigh import commentary


def test_shot_shape():
    assert commentary.shot_shape(0.4) == "straight"
    assert commentary.shot_shape(-2.0) == "slight draw"
    assert commentary.shot_shape(5.0) == "fade"


def test_proximity_units():
    assert commentary.proximity_text(0.2) == "8 in"
    assert commentary.proximity_text(1.5) == "5 ft"
    assert commentary.proximity_text(5.0) == "5 yds"
    assert commentary.proximity_text(40.0) == "44 yds to pin"
    assert commentary.proximity_text(3.0, holed=True) == "Holed!"


def test_tree_hit_overrides_note():
    c = commentary.build(152.4, "7-iron", 0.0, 30.0, "Clean lie", hit_tree=True)
    assert c.note == "Hit tree! Ball deflected."
    assert c.proximity == "Deflected off tree"
    assert c.headline().startswith("7-iron, 152 yds, straight.")


def test_penalty_headline():
    assert commentary.penalty("OB - re-hit from previous spot").headline() == \
        "Penalty stroke. OB - re-hit from previous spot"
