import unittest

from bs4 import BeautifulSoup

from pagemedia.classifier import classify, resource_element
from pagemedia.extractor import extract, is_eligible
from pagemedia.models import AudioType, MediaVariant
from pagemedia.thumbnail import MediaCollaborators


def _collaborators(*, too_small: bool = False, disallowed: bool = False, spoken: bool = False):
    scaled = []
    collaborators = MediaCollaborators(
        is_too_small=lambda img: too_small,
        is_disallowed=lambda elem: disallowed,
        scale_element=scaled.append,
        in_spoken_region=lambda elem: spoken,
    )
    return collaborators, scaled


def _candidate(markup: str, selector: str):
    soup = BeautifulSoup(markup, "html.parser")
    elem = soup.select_one(selector)
    variant = classify(elem)
    return variant, elem, resource_element(variant, elem)


class EligibilityTestCase(unittest.TestCase):
    def test_image_rejected_when_too_small_or_disallowed(self) -> None:
        variant, elem, resource = _candidate('<span typeof="mw:File"><img src="a.jpg"/></span>', "span")
        self.assertTrue(is_eligible(variant, elem, resource, _collaborators()[0]))
        self.assertFalse(is_eligible(variant, elem, resource, _collaborators(too_small=True)[0]))
        self.assertFalse(is_eligible(variant, elem, resource, _collaborators(disallowed=True)[0]))

    def test_timeline_requires_png_image(self) -> None:
        collaborators, _ = _collaborators()
        png = _candidate('<div typeof="mw:Extension/timeline"><img src="//x/t.png"/></div>', "div")
        svg = _candidate('<div typeof="mw:Extension/timeline"><img src="//x/t.svg"/></div>', "div")
        bare = _candidate('<div typeof="mw:Extension/timeline"><map></map></div>', "div")
        no_src = _candidate('<div typeof="mw:Extension/timeline"><img alt="t"/></div>', "div")
        self.assertTrue(is_eligible(*png, collaborators))
        self.assertFalse(is_eligible(*svg, collaborators))
        self.assertFalse(is_eligible(*bare, collaborators))
        self.assertFalse(is_eligible(*no_src, collaborators))

    def test_other_variants_always_eligible(self) -> None:
        collaborators, _ = _collaborators(too_small=True, disallowed=True)
        link = _candidate('<a rel="mw:MediaLink" resource="./Media:A.ogg">a</a>', "a")
        self.assertTrue(is_eligible(*link, collaborators))


    def test_unknown_variant_is_never_eligible(self) -> None:
        collaborators, _ = _collaborators()
        elem = BeautifulSoup("<p>text</p>", "html.parser").p
        self.assertFalse(is_eligible(MediaVariant.UNKNOWN, elem, elem, collaborators))

    def test_every_variant_has_an_eligibility_rule(self) -> None:
        collaborators, _ = _collaborators()
        elem = BeautifulSoup("<div><img src=\"t.png\"/></div>", "html.parser").div
        for variant in MediaVariant:
            self.assertIsInstance(is_eligible(variant, elem, elem, collaborators), bool)


class ExtractTestCase(unittest.TestCase):
    def test_image_record(self) -> None:
        markup = """
        <section data-mw-section-id="3">
          <ul class="gallery" id="mwGallery7"><li>
            <figure typeof="mw:File/Thumb">
              <img resource="./File:Bird%20nest.jpg" src="a.jpg" srcset="b.jpg 2x"/>
              <figcaption>The <i>nest</i></figcaption>
            </figure>
          </li></ul>
        </section>
        """
        collaborators, scaled = _collaborators()
        variant, elem, resource = _candidate(markup, "figure")
        item = extract(variant, elem, resource, collaborators)

        self.assertEqual(item.type, "image")
        self.assertEqual(item.title, "File:Bird nest.jpg")
        self.assertEqual(item.section_id, 3)
        self.assertEqual(item.gallery_id, "mwGallery7")
        self.assertEqual(item.caption.html, "The <i>nest</i>")
        self.assertEqual(item.caption.text, "The nest")
        self.assertEqual([(entry.src, entry.scale) for entry in item.srcset], [("a.jpg", "1x"), ("b.jpg", "2x")])
        self.assertTrue(item.show_in_gallery)
        self.assertFalse(item.lead_image)
        self.assertEqual([img.name for img in scaled], ["img"])
        self.assertIsNone(item.original)
        self.assertIsNone(item.sources)
        self.assertIsNone(item.audio_type)

    def test_image_without_sources_omits_srcset(self) -> None:
        collaborators, _ = _collaborators()
        variant, elem, resource = _candidate('<span typeof="mw:File"><img resource="./File:A.jpg"/></span>', "span")
        item = extract(variant, elem, resource, collaborators)
        self.assertIsNone(item.srcset)
        self.assertNotIn("srcset", item.to_dict())

    def test_video_record(self) -> None:
        markup = """
        <figure typeof="mw:File/Thumb" data-mw='{"starttime": 2, "endtime": "0:10", "thumbtime": "4"}'>
          <video resource="./File:Flight.webm">
            <source src="v.webm" type='video/webm; codecs="vp9, opus"' data-title="Original" data-shorttitle="WebM"
                    data-file-width="1920" data-file-height="1080" data-width="640" data-height="360"/>
            <source src="v.mp4" data-width="854" data-height="480"/>
          </video>
        </figure>
        """
        collaborators, _ = _collaborators()
        variant, elem, resource = _candidate(markup, "figure")
        item = extract(variant, elem, resource, collaborators)

        self.assertIs(variant, MediaVariant.VIDEO)
        self.assertEqual(item.title, "File:Flight.webm")
        self.assertEqual((item.start_time, item.end_time, item.thumb_time), (2, 10, 4))
        first, second = item.sources
        self.assertEqual(first.url, "v.webm")
        self.assertEqual(first.mime, "video/webm")
        self.assertEqual(first.codecs, ["vp9", "opus"])
        self.assertEqual(first.name, "Original")
        self.assertEqual(first.short_name, "WebM")
        self.assertEqual((first.width, first.height), (1920, 1080))
        self.assertIsNone(second.mime)
        self.assertIsNone(second.codecs)
        self.assertEqual((second.width, second.height), (854, 480))
        self.assertTrue(item.show_in_gallery)
        self.assertEqual(
            item.to_dict()["sources"][0],
            {
                "url": "v.webm",
                "mime": "video/webm",
                "codecs": ["vp9", "opus"],
                "name": "Original",
                "shortName": "WebM",
                "width": 1920,
                "height": 1080,
            },
        )

    def test_video_with_malformed_structured_data(self) -> None:
        markup = '<figure typeof="mw:File" data-mw="{broken"><video><source src="v.webm" type="video/webm"/></video></figure>'
        collaborators, _ = _collaborators()
        variant, elem, resource = _candidate(markup, "figure")
        with self.assertLogs("pagemedia.attributes", level="WARNING"):
            item = extract(variant, elem, resource, collaborators)
        self.assertIsNone(item.start_time)
        self.assertIsNone(item.end_time)
        self.assertIsNone(item.thumb_time)
        self.assertEqual(len(item.sources), 1)
        self.assertIsNone(item.title)

    def test_video_with_non_finite_timings(self) -> None:
        markup = (
            "<figure typeof=\"mw:File\" data-mw='{\"starttime\": NaN, \"endtime\": Infinity, \"thumbtime\": 3}'>"
            "<video><source src=\"v.webm\"/></video></figure>"
        )
        variant, elem, resource = _candidate(markup, "figure")
        item = extract(variant, elem, resource, _collaborators()[0])
        self.assertIsNone(item.start_time)
        self.assertIsNone(item.end_time)
        self.assertEqual(item.thumb_time, 3)
        record = item.to_dict()
        self.assertNotIn("startTime", record)
        self.assertNotIn("endTime", record)

    def test_audio_types(self) -> None:
        markup = '<span typeof="mw:File"><audio resource="./File:Song.ogg"></audio></span>'
        variant, elem, resource = _candidate(markup, "span")
        generic = extract(variant, elem, resource, _collaborators()[0])
        spoken = extract(variant, elem, resource, _collaborators(spoken=True)[0])
        self.assertEqual(generic.audio_type, AudioType.GENERIC)
        self.assertEqual(spoken.audio_type, AudioType.SPOKEN)
        self.assertEqual(generic.type, "audio")
        self.assertFalse(generic.show_in_gallery)
        self.assertEqual(generic.title, "File:Song.ogg")

    def test_pronunciation(self) -> None:
        variant, elem, resource = _candidate('<a rel="mw:MediaLink" resource="./Media:Say.ogg">say</a>', "a")
        item = extract(variant, elem, resource, _collaborators(spoken=True)[0])
        self.assertEqual(item.audio_type, AudioType.PRONUNCIATION)
        self.assertEqual(item.to_dict()["audioType"], "pronunciation")
        self.assertEqual(item.title, "Media:Say.ogg")

    def test_math_image(self) -> None:
        markup = '<img class="mwe-math-fallback-image-inline" src="https://math/svg/1"/>'
        variant, elem, resource = _candidate(markup, "img")
        item = extract(variant, elem, resource, _collaborators()[0])
        self.assertEqual(item.to_dict()["original"], {"source": "https://math/svg/1", "mime": "image/svg"})
        self.assertEqual(item.type, "image")
        self.assertFalse(item.show_in_gallery)
        self.assertIsNone(item.srcset)

    def test_timeline_image(self) -> None:
        variant, elem, resource = _candidate('<div typeof="mw:Extension/timeline"><img src="//x/t.png"/></div>', "div")
        item = extract(variant, elem, resource, _collaborators()[0])
        self.assertEqual(item.to_dict()["original"], {"source": "//x/t.png", "mime": "image/png"})
        self.assertIsNone(item.title)

    def test_shared_fields_absent_without_context(self) -> None:
        variant, elem, resource = _candidate('<a rel="mw:MediaLink">say</a>', "a")
        record = extract(variant, elem, resource, _collaborators()[0]).to_dict()
        self.assertEqual(
            record,
            {"leadImage": False, "type": "audio", "audioType": "pronunciation", "showInGallery": False},
        )

    def test_non_numeric_section_id_is_absent(self) -> None:
        markup = '<section data-mw-section-id="lead"><a rel="mw:MediaLink">say</a></section>'
        variant, elem, resource = _candidate(markup, "a")
        self.assertIsNone(extract(variant, elem, resource, _collaborators()[0]).section_id)


if __name__ == "__main__":
    unittest.main()
