"""Shared component sources for the test suite."""

import pytest

HERO_SOURCE = """\
import React from 'react'
import Link from 'next/link'

interface HeroBannerProps {
  title?: string
  subtitle?: string
  backgroundImage?: string
  buttonLabel?: string
  buttonUrl?: string
}

export default function HeroBanner({
  title = 'Welcome to Riverside',
  subtitle = 'Community programs for every age',
  backgroundImage = '/hero.jpg',
  buttonLabel = 'Get started',
  buttonUrl = '/contact',
}: HeroBannerProps) {
  return (
    <section
      className="relative w-full min-h-screen bg-cover bg-center"
      style={{ backgroundImage: `url(${backgroundImage})` }}
    >
      <div className="mx-auto px-6 py-32 text-center">
        <h1 className="text-6xl font-bold text-white">{title}</h1>
        <p className="mt-4 text-xl text-white">{subtitle}</p>
        <Link href={buttonUrl} className="mt-8 inline-block rounded bg-white px-6 py-3">
          {buttonLabel}
        </Link>
      </div>
    </section>
  )
}
"""

PROGRAMS_SOURCE = """\
interface Card {
  title: string
  image: string
  description: string
}

export function Programs({ title = 'Our Programs', cards = [] }: { title?: string; cards?: Card[] }) {
  return (
    <section className="py-16">
      <h2 className="text-3xl font-bold">{title}</h2>
      <div className="grid gap-6">
        {cards.map((card) => (
          <div key={card.title} className="card rounded shadow">
            <img src={card.image} alt={card.title} />
            <h3>{card.title}</h3>
            <p>{card.description}</p>
          </div>
        ))}
      </div>
    </section>
  )
}
"""

# Same component with a responsive column layout added.
PROGRAMS_RESPONSIVE_SOURCE = PROGRAMS_SOURCE.replace(
    'className="grid gap-6"', 'className="grid grid-cols-1 md:grid-cols-3 gap-6"'
)

WIDGET_SOURCE = """\
export default function Widget({ title = 'Hello', subtitle = 'World' }) {
  return (
    <div className="p-4">
      <span>{title}</span>
      <span>{subtitle}</span>
    </div>
  )
}
"""

BROKEN_SOURCE = """\
export default function Broken( {
  return <div className="x">
"""


@pytest.fixture
def components_dir(tmp_path):
    """A small component tree with a hero, a card grid and some noise."""
    root = tmp_path / "components"
    (root / "sections").mkdir(parents=True)
    (root / "HeroBanner.tsx").write_text(HERO_SOURCE)
    (root / "sections" / "Programs.tsx").write_text(PROGRAMS_SOURCE)
    (root / "README.md").write_text("# Components\n")
    (root / "types.d.ts").write_text("declare const x: number\n")
    ignored = root / "node_modules" / "lib"
    ignored.mkdir(parents=True)
    (ignored / "Ignored.tsx").write_text(WIDGET_SOURCE)
    return root
