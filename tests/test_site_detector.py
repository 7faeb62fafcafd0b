import json
import os
import tempfile
import unittest

from novelbin_archiver.models import SelectorRule
from novelbin_archiver.modules.content import locate_content
from novelbin_archiver.modules.site_detector import DEFAULT_BOILERPLATE_RULES, SiteDetector
from novelbin_archiver.utils import set_quiet


class TestSiteDetector(unittest.TestCase):
    """Tests for profile lookup and JSON profile loading."""

    def setUp(self):
        set_quiet(True)
        self.detector = SiteDetector()

    def tearDown(self):
        set_quiet(False)

    def test_known_hosts(self):
        for url in ("https://novelbin.org/b/x", "https://www.novelbin.com/b/x", "http://novlove.com/n"):
            self.assertEqual(self.detector.detect_site(url, silent=True).name, "NovelBin")

    def test_unknown_host_gets_generic_profile(self):
        profile = self.detector.detect_site("https://mirror.example.net:8443/b/x", silent=True)
        self.assertEqual(profile.name, "Generic")
        self.assertEqual(profile.base_url, "https://mirror.example.net:8443")
        self.assertTrue(profile.candidate_selectors)

    def test_detection_cached(self):
        first = self.detector.detect_site("https://novelbin.org/a")
        second = self.detector.detect_site("https://novelbin.org/b")
        self.assertIs(first, second)

    def test_boilerplate_table(self):
        selectors = [rule.selector for rule in DEFAULT_BOILERPLATE_RULES]
        for expected in ('[class*="breadcrumb"]', '[class*="pf-"]', 'aside', 'nav'):
            self.assertIn(expected, selectors)

    def test_allowed_hosts_and_list_sites(self):
        self.assertIn("novelbin.org", self.detector.allowed_hosts)
        self.assertEqual(len(self.detector.list_sites()), 1)


class TestLoadProfiles(unittest.TestCase):

    def setUp(self):
        set_quiet(True)
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "profiles.json")

    def tearDown(self):
        self.tmp.cleanup()
        set_quiet(False)

    def write(self, data):
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f)

    def test_mirror_profile_extends_builtin(self):
        self.write({"profiles": [{
            "name": "Mirror",
            "extends": "novelbin.org",
            "hosts": ["novel-mirror.net"],
            "base_url": "https://novel-mirror.net",
            "candidate_selectors": ["#story"],
            "boilerplate_rules": ['[class*="promo"]', {"selector": ".tip", "action": "remove"}],
            "not_a_field": True,
        }]})
        detector = SiteDetector()
        loaded = detector.load_profiles(self.path)

        self.assertEqual(len(loaded), 1)
        profile = detector.detect_site("https://novel-mirror.net/b/x", silent=True)
        self.assertEqual(profile.name, "Mirror")
        self.assertEqual(profile.archive_path, "/ajax/chapter-archive")
        self.assertEqual(profile.boilerplate_rules, [SelectorRule('[class*="promo"]'), SelectorRule(".tip")])
        self.assertIn("novel-mirror.net", detector.allowed_hosts)
        self.assertEqual(len(detector.list_sites()), 2)

    def test_profile_drives_extraction(self):
        self.write([{"name": "Story", "hosts": ["story.example"], "candidate_selectors": ["#story"],
                     "boilerplate_rules": [".promo"]}])
        detector = SiteDetector()
        detector.load_profiles(self.path)
        profile = detector.detect_site("https://story.example/c/1", silent=True)

        page = ('<html><body><div id="story"><p>' + "s" * 150 + '</p>'
                '<div class="promo">buy now</div><nav>kept by this profile</nav></div></body></html>')
        result = locate_content(page, "https://story.example/c/1", profile)
        self.assertIn("s" * 150, result.content)
        self.assertNotIn("buy now", result.content)
        self.assertIn("kept by this profile", result.content)


if __name__ == '__main__':
    unittest.main()
