from kakuli.media.workdir import ArtifactDir, safe_job_id


def test_safe_job_id_strips_path_characters():
    assert safe_job_id("../../etc/passwd") == "etcpasswd"
    assert safe_job_id("///") == "job"


def test_path_for_is_unique_per_call(tmp_path):
    workdir = ArtifactDir(tmp_path / "w")
    first = workdir.path_for("video", "msg:1", ".mp4")
    second = workdir.path_for("video", "msg:1", ".mp4")
    assert first != second
    assert first.parent == workdir.root
    assert first.name.startswith("video_msg1_")
    assert first.suffix == ".mp4"


def test_scratch_removes_files_on_error(tmp_path):
    workdir = ArtifactDir(tmp_path / "w")
    created = []
    try:
        with workdir.scratch("m1", "video.mp4", "sticker.webp") as paths:
            for p in paths:
                p.write_bytes(b"x")
            created.extend(paths)
            raise ValueError("fail")
    except ValueError:
        pass
    assert len(created) == 2
    assert not any(p.exists() for p in created)


def test_remove_deletes_directory(tmp_path):
    workdir = ArtifactDir(tmp_path / "w")
    workdir.path_for("voice", "m1", ".mp3").write_bytes(b"x")
    workdir.remove()
    assert not workdir.root.exists()
    workdir.remove()
