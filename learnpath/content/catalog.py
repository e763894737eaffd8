"""Hand-authored Red Hat resources used when a live search comes back empty."""

from typing import Dict, List, Tuple

from learnpath.content.classifier import extract_domain
from learnpath.models import ContentResult, ContentType

CATALOG_LIMIT = 3

# (trigger terms, entries); an entry is (title, url, description, type)
Entry = Tuple[str, str, str, ContentType]

_GENERAL: List[Tuple[Tuple[str, ...], List[Entry]]] = [
    (
        ("openshift",),
        [
            (
                "Red Hat OpenShift Documentation",
                "https://docs.redhat.com/en/documentation/openshift_container_platform",
                "Complete documentation for Red Hat OpenShift Container Platform",
                ContentType.DOCUMENTATION,
            ),
            (
                "Getting Started with OpenShift",
                "https://www.redhat.com/en/technologies/cloud-computing/openshift",
                "Learn about Red Hat OpenShift, the enterprise Kubernetes platform",
                ContentType.ARTICLE,
            ),
        ],
    ),
    (
        ("ansible",),
        [
            (
                "Ansible Automation Platform Documentation",
                "https://docs.redhat.com/en/documentation/red_hat_ansible_automation_platform",
                "Documentation for Red Hat Ansible Automation Platform",
                ContentType.DOCUMENTATION,
            ),
            (
                "Red Hat Ansible Training",
                "https://www.redhat.com/en/services/training/all-courses-exams",
                "Ansible training courses and certifications from Red Hat",
                ContentType.TRAINING,
            ),
        ],
    ),
    (
        ("rhel", "linux"),
        [
            (
                "Red Hat Enterprise Linux Documentation",
                "https://docs.redhat.com/en/documentation/red_hat_enterprise_linux",
                "Complete RHEL documentation and system administration guides",
                ContentType.DOCUMENTATION,
            ),
        ],
    ),
    (
        ("training", "certification"),
        [
            (
                "Red Hat Training and Certification",
                "https://www.redhat.com/en/services/training",
                "Red Hat training courses and certification programs",
                ContentType.TRAINING,
            ),
        ],
    ),
]

_GENERAL_DEFAULT: List[Entry] = [
    (
        "Red Hat Customer Portal",
        "https://access.redhat.com/",
        "Access Red Hat documentation, support, and resources",
        ContentType.DOCUMENTATION,
    ),
    (
        "Red Hat Developer",
        "https://developers.redhat.com/",
        "Resources and tools for Red Hat developers",
        ContentType.ARTICLE,
    ),
]

_VIDEOS: List[Tuple[Tuple[str, ...], List[Entry]]] = [
    (
        ("openshift",),
        [
            (
                "Navigating tomorrow: Red Hat OpenShift's roadmap in 2025 and beyond",
                "https://tv.redhat.com/detail/6376346795112/navigating-tomorrow-red-hat-openshifts-roadmap-in-2025-and-beyond",
                "Discover the future of Red Hat OpenShift and how it continues to redefine container orchestration.",
                ContentType.VIDEO,
            ),
            (
                "Introduction to OpenShift Virtualization - Part 1",
                "https://tv.redhat.com/detail/6370254516112/introduction-to-openshift-virtualization-part-1",
                "Run virtualized workloads next to containerized workloads on Red Hat OpenShift.",
                ContentType.VIDEO,
            ),
        ],
    ),
    (
        ("ansible",),
        [
            (
                "The future of automation: Red Hat Ansible Automation Platform roadmap",
                "https://tv.redhat.com/detail/6370134335114/the-future-of-automation-red-hat-ansible-automation-platform-roadmap",
                "Explore the automation roadmap and new features coming to Red Hat Ansible Automation Platform.",
                ContentType.VIDEO,
            ),
        ],
    ),
    (
        ("rhel", "linux"),
        [
            (
                "The Red Hat Enterprise Linux 10 roadmap: Reimagining a Linux platform",
                "https://tv.redhat.com/detail/6370134335116/the-red-hat-enterprise-linux-10-roadmap-reimagining-a-linux-platform",
                "RHEL 10 features and the development roadmap for the next generation of enterprise Linux.",
                ContentType.VIDEO,
            ),
        ],
    ),
    (
        ("ai", "artificial intelligence"),
        [
            (
                "Red Hat AI roadmap: Our vision and strategy",
                "https://tv.redhat.com/detail/6370134335118/red-hat-ai-roadmap-our-vision-and-strategy",
                "Red Hat's AI strategy and roadmap.",
                ContentType.VIDEO,
            ),
        ],
    ),
]

_VIDEOS_DEFAULT: List[Entry] = [
    (
        "Red Hat TV - Latest Videos and Webinars",
        "https://tv.redhat.com/",
        "The latest Red Hat videos, webinars, and technical content on Red Hat TV.",
        ContentType.VIDEO,
    ),
]

_CATALOGS: Dict[str, Tuple[List[Tuple[Tuple[str, ...], List[Entry]]], List[Entry]]] = {
    "general": (_GENERAL, _GENERAL_DEFAULT),
    "video": (_VIDEOS, _VIDEOS_DEFAULT),
}


def fallback_results(query: str, source: str, kind: str = "general") -> List[ContentResult]:
    """Return up to three canned resources whose trigger terms occur in ``query``."""
    sections, default = _CATALOGS[kind]
    query_lower = query.lower()

    entries: List[Entry] = []
    for triggers, section in sections:
        if any(term in query_lower for term in triggers):
            entries.extend(section)
    if not entries:
        entries = default

    return [
        ContentResult(
            title=title,
            url=url,
            description=description,
            type=content_type,
            source=source,
            search_query=query,
            domain=extract_domain(url),
        )
        for title, url, description, content_type in entries[:CATALOG_LIMIT]
    ]
