import os

import pytest
from PIL import Image

import gifblocks
import giftool


class TestInfo:
    def test_info(self, animated_gif, capsys):
        giftool.main(["--path", animated_gif])
        out = capsys.readouterr().out
        assert out.startswith(animated_gif + ":")
        assert "-- Image Descriptor" in out

    def test_bad_file(self, write_bytes, capsys):
        path = write_bytes(b"GIX89a")
        with pytest.raises(SystemExit) as e:
            giftool.main(["-i", path])
        assert e.value.code == 1
        assert "Bad signature" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as e:
            giftool.main(["-i", str(tmp_path / "missing.gif")])
        assert e.value.code == 1
        assert "could not read file" in capsys.readouterr().err

    def test_path_required(self):
        with pytest.raises(SystemExit) as e:
            giftool.main([])
        assert e.value.code == 2

    def test_help(self, capsys):
        with pytest.raises(SystemExit) as e:
            giftool.main(["-m", "help"])
        assert e.value.code == 0
        assert "Available modes" in capsys.readouterr().out


class TestRewrite:
    def test_reverse(self, animated_gif, tmp_path):
        out = str(tmp_path / "reversed.gif")
        giftool.main(["-m", "reverse", "-i", animated_gif, "-o", out])
        assert gifblocks.load(out) == gifblocks.load(animated_gif).reverse()

    def test_reverse_needs_output(self, animated_gif):
        with pytest.raises(SystemExit):
            giftool.main(["-m", "reverse", "-i", animated_gif])

    def test_resize(self, animated_gif, tmp_path):
        out = str(tmp_path / "resized.gif")
        giftool.main(["-m", "resize", "-i", animated_gif, "-o", out, "--width", "10", "--height", "20"])
        gif = gifblocks.load(out)
        assert (gif.screen_width, gif.screen_height) == (10, 20)

    def test_resize_out_of_range(self, animated_gif, tmp_path):
        out = str(tmp_path / "resized.gif")
        with pytest.raises(SystemExit) as e:
            giftool.main(["-m", "resize", "-i", animated_gif, "-o", out, "--width", "70000", "--height", "1"])
        assert e.value.code == 2
        assert not os.path.exists(out)


class TestPalette:
    def test_global(self, animated_gif, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        giftool.main(["-m", "palette", "-i", animated_gif])
        img = Image.open("animated_palette.png")
        assert img.size == (50, 50)
        assert img.getpixel((30, 0)) == (3, 4, 5)

    def test_with_local(self, animated_gif, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        giftool.main(["-m", "palette", "-i", animated_gif, "--add-local"])
        assert sorted(os.listdir("animated_palette")) == ["2.png", "__global.png"]

    def test_no_global(self, minimal_gif, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(SystemExit):
            giftool.main(["-m", "palette", "-i", minimal_gif])


def make_gif(num_frames, local_frames, global_table=True):
    table = tuple(gifblocks.Color(n, n, n) for n in range(4))
    images = tuple(
        gifblocks.GifImage(
            image_descriptor=gifblocks.ImageDescriptor(packed_fields=gifblocks.ImageDescriptorFields(
                local_color_table_flag=n in local_frames, size_of_local_color_table=1)),
            image_data=gifblocks.ImageData(2, ()),
            colortable=table if n in local_frames else None)
        for n in range(num_frames))
    return gifblocks.Gif(
        header=gifblocks.Header(),
        logical_screen_descriptor=gifblocks.LogicalScreenDescriptor(packed_fields=gifblocks.ScreenDescriptorFields(
            global_color_table_flag=global_table, size_of_global_color_table=1)),
        colortable=table if global_table else None,
        images=images)


class TestPaletteTables:
    def test_names_padded_to_last_frame_index(self):
        tables = giftool.palette_tables(make_gif(11, {2, 10}), add_local=True)
        assert sorted(tables) == ["02.png", "10.png", "__global.png"]

    def test_global_only(self):
        tables = giftool.palette_tables(make_gif(11, {2, 10}), add_local=False)
        assert list(tables) == ["__global.png"]

    def test_local_without_global(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        path = str(tmp_path / "locals.gif")
        make_gif(3, {0, 1}, global_table=False).save(path)
        giftool.main(["-m", "palette", "-i", path, "--add-local"])
        assert sorted(os.listdir("locals_palette")) == ["0.png", "1.png"]
        assert "warn: no global colortable" in capsys.readouterr().out

    def test_image_layout(self):
        table = tuple(gifblocks.Color(n, 0, 0) for n in range(8))
        img = giftool.palette_image(table, swatch_size=10)
        assert img.size == (30, 30)
        assert img.getpixel((5, 15)) == (3, 0, 0)
        # ninth swatch has no color
        assert img.getpixel((25, 25)) == giftool.PALETTE_BACKGROUND
